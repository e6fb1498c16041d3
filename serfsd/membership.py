from __future__ import annotations

import ipaddress
import socket
from typing import Any, Callable, Protocol, runtime_checkable

from serfclient import SerfClient

from .runtime import Member


class MembershipError(Exception):
    pass


class MembershipConnectionError(MembershipError):
    """The Serf agent could not be reached or refused the handshake."""


class MembershipQueryError(MembershipError):
    """Connected, but the member list request failed."""


@runtime_checkable
class MembershipClient(Protocol):
    def members(self) -> list[Member]:
        ...

    def close(self) -> None:
        ...


Connector = Callable[[str], MembershipClient]


def split_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` for IPv6) into its parts."""
    host, sep, port = address.strip().rpartition(":")
    if not sep or not host or not port.isdigit():
        raise MembershipConnectionError(f"Invalid Serf address {address!r}; expected host:port.")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port_i = int(port)
    if not 0 < port_i < 65536:
        raise MembershipConnectionError(f"Invalid port in Serf address {address!r}.")
    return host, port_i


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return "" if value is None else str(value)


def _addr(value: Any) -> str:
    """Render a member address.

    Serf sends Addr as a packed IP (4 or 16 bytes). Values that are already
    textual IPs, e.g. converted by an older serfclient, pass through.
    """
    if isinstance(value, bytes) and len(value) in (4, 16):
        try:
            text = value.decode("ascii")
            ipaddress.ip_address(text)
            return text
        except (UnicodeDecodeError, ValueError):
            pass
        family = socket.AF_INET if len(value) == 4 else socket.AF_INET6
        return socket.inet_ntop(family, value).removeprefix("::ffff:")
    return _text(value)


def _field(record: dict[Any, Any], name: str) -> Any:
    # msgpack >= 1.0 yields str keys; older unpackers yield bytes keys.
    if name in record:
        return record[name]
    return record.get(name.encode())


def member_from_record(record: dict[Any, Any]) -> Member:
    tags = _field(record, "Tags") or {}
    return Member(
        addr=_addr(_field(record, "Addr")),
        port=int(_field(record, "Port") or 0),
        name=_text(_field(record, "Name")),
        tags={_text(k): _text(v) for k, v in tags.items()},
        status=_text(_field(record, "Status")),
    )


class SerfMembershipClient:
    """MembershipClient over the Serf RPC protocol (via ``serfclient``)."""

    def __init__(self, client: SerfClient) -> None:
        self._client = client

    def members(self) -> list[Member]:
        try:
            result = self._client.members()
        except Exception as e:
            raise MembershipQueryError(f"{type(e).__name__}: {e}") from e

        error = _text(_field(result.head or {}, "Error"))
        if error:
            raise MembershipQueryError(error)
        records = _field(result.body or {}, "Members") or []
        return [member_from_record(r) for r in records]

    def close(self) -> None:
        self._client.connection.close()


def connect_serf(address: str, timeout: float = 3.0) -> SerfMembershipClient:
    host, port = split_address(address)
    try:
        client = SerfClient(host=host, port=port, timeout=timeout)
    except Exception as e:
        raise MembershipConnectionError(f"{type(e).__name__}: {e}") from e
    return SerfMembershipClient(client)
