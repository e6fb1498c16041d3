from __future__ import annotations

from .runtime import ADDRESS_LABEL, Member, TargetGroup


def join_host_port(host: str, port: int) -> str:
    # IPv6 literals need brackets so the port stays unambiguous.
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def build_target_group(member: Member) -> TargetGroup:
    """Map one member to a group with a single ``host:port`` target.

    Group labels stay empty; they are reserved for tag derived labels.
    Input is not validated, a malformed address ends up in the target as is.
    """
    addr = join_host_port(member.addr, member.port)
    return TargetGroup(source=addr, labels={}, targets=({ADDRESS_LABEL: addr},))


def tombstone(source: str) -> TargetGroup:
    return TargetGroup(source=source)
