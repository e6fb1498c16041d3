from serfsd.runtime import ADDRESS_LABEL, Member, TargetGroup
from serfsd.targets import build_target_group, join_host_port, tombstone


def test_build_target_group_single_address_target():
    tg = build_target_group(Member(addr="10.0.0.1", port=9100, name="node-1", tags={"role": "web"}))
    assert tg.source == "10.0.0.1:9100"
    assert tg.targets == ({ADDRESS_LABEL: "10.0.0.1:9100"},)
    assert dict(tg.labels) == {}
    assert tg.is_tombstone is False
    assert tg.addresses() == ["10.0.0.1:9100"]


def test_build_target_group_is_deterministic():
    member = Member(addr="10.0.0.2", port=9100)
    assert build_target_group(member) == build_target_group(member)


def test_ipv6_hosts_are_bracketed():
    assert join_host_port("fe80::1", 7946) == "[fe80::1]:7946"
    assert join_host_port("[fe80::1]", 7946) == "[fe80::1]:7946"
    assert join_host_port("node.local", 80) == "node.local:80"


def test_malformed_address_is_passed_through():
    tg = build_target_group(Member(addr="", port=0))
    assert tg.source == ":0"
    assert tg.addresses() == [":0"]


def test_tombstone_has_only_source():
    tg = tombstone("10.0.0.2:9100")
    assert tg == TargetGroup(source="10.0.0.2:9100")
    assert tg.is_tombstone
    assert tg.addresses() == []
