"""Requests that add, delete and list neighbour cache entries."""

from __future__ import annotations

import enum
import ipaddress
from typing import Any, AsyncIterator, Protocol, Union

from .netlink import (
    AddressFamily,
    Attr,
    MessageType,
    NeighbourFlags,
    NeighbourHeader,
    NeighbourMessage,
    NeighbourState,
    NetlinkFlags,
    NetlinkMessage,
    RouteType,
    check_error,
    expect_payload,
)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class _Requester(Protocol):
    def request(self, message: NetlinkMessage) -> AsyncIterator[NetlinkMessage]:
        ...


async def _send(
    handle: _Requester, message_type: MessageType, payload: Any, flags: int
) -> None:
    request = NetlinkMessage(message_type, payload, NetlinkFlags(flags))
    async for reply in handle.request(request):
        check_error(reply)


class IpVersion(enum.Enum):
    V4 = 4
    V6 = 6

    def family(self) -> AddressFamily:
        return AddressFamily.INET if self is IpVersion.V4 else AddressFamily.INET6


def _family_of(ip: IPAddress) -> AddressFamily:
    return AddressFamily.INET if ip.version == 4 else AddressFamily.INET6


class NeighbourAddRequest:
    """Add a neighbour cache entry (``ip neighbour add``)."""

    def __init__(
        self, handle: _Requester, index: int, destination: IPAddress | str
    ) -> None:
        ip = ipaddress.ip_address(destination)
        self._handle = handle
        self.message = NeighbourMessage(
            header=NeighbourHeader(
                family=_family_of(ip),
                ifindex=index,
                state=NeighbourState.PERMANENT,
                kind=RouteType.UNSPEC,
            ),
            attributes=[Attr("destination", ip)],
        )
        self._replace = False

    @classmethod
    def bridge(
        cls, handle: _Requester, index: int, lla: bytes
    ) -> NeighbourAddRequest:
        """Add a bridge forwarding database entry (``bridge fdb add``)."""
        request = cls.__new__(cls)
        request._handle = handle
        request.message = NeighbourMessage(
            header=NeighbourHeader(
                family=AddressFamily.BRIDGE,
                ifindex=index,
                state=NeighbourState.PERMANENT,
                kind=RouteType.UNSPEC,
            ),
            attributes=[Attr("link_local_address", bytes(lla))],
        )
        request._replace = False
        return request

    def state(self, state: NeighbourState) -> NeighbourAddRequest:
        """Set the NUD_* state bitmask of the entry."""
        self.message.header.state = NeighbourState(state)
        return self

    def flags(self, flags: NeighbourFlags) -> NeighbourAddRequest:
        """Set the NTF_* flags of the entry."""
        self.message.header.flags = NeighbourFlags(flags)
        return self

    def kind(self, kind: RouteType) -> NeighbourAddRequest:
        self.message.header.kind = RouteType(kind)
        return self

    def _set_attr(self, attr: Attr) -> None:
        attributes = self.message.attributes
        position = next(
            (i for i, existing in enumerate(attributes) if existing.kind == attr.kind),
            None,
        )
        if position is None:
            attributes.append(attr)
        else:
            attributes[position] = attr

    def link_local_address(self, addr: bytes) -> NeighbourAddRequest:
        """Set the link layer address (NDA_LLADDR)."""
        self._set_attr(Attr("link_local_address", bytes(addr)))
        return self

    def destination(self, addr: IPAddress | str) -> NeighbourAddRequest:
        """Set the destination address (NDA_DST)."""
        self._set_attr(Attr("destination", ipaddress.ip_address(addr)))
        return self

    def replace(self) -> NeighbourAddRequest:
        """Replace an existing matching neighbour."""
        self._replace = True
        return self

    @property
    def netlink_flags(self) -> NetlinkFlags:
        mode = NetlinkFlags.REPLACE if self._replace else NetlinkFlags.EXCL
        return NetlinkFlags.REQUEST | NetlinkFlags.ACK | mode | NetlinkFlags.CREATE

    async def execute(self) -> None:
        await _send(
            self._handle, MessageType.NEWNEIGH, self.message, self.netlink_flags
        )


class NeighbourDelRequest:
    """Delete the neighbour entry described by a message."""

    def __init__(self, handle: _Requester, message: NeighbourMessage) -> None:
        self._handle = handle
        self.message = message

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.DELNEIGH,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.ACK,
        )


class NeighbourGetRequest:
    """List neighbour entries (``ip neighbour show``)."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle
        self.message = NeighbourMessage()

    def proxies(self) -> NeighbourGetRequest:
        """List neighbour proxies (``ip neighbour show proxy``)."""
        self.message.header.flags |= NeighbourFlags.PROXY
        return self

    def set_family(self, ip_version: IpVersion) -> NeighbourGetRequest:
        self.message.header.family = ip_version.family()
        return self

    async def execute(self) -> AsyncIterator[NeighbourMessage]:
        """Yield the neighbour messages the kernel returns."""
        request = NetlinkMessage(
            MessageType.GETNEIGH,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.DUMP,
        )
        async for reply in self._handle.request(request):
            yield expect_payload(reply, MessageType.NEWNEIGH)


class NeighbourHandle:
    """Entry point for neighbour requests (``ip neighbour``)."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle

    def get(self) -> NeighbourGetRequest:
        return NeighbourGetRequest(self._handle)

    def add(self, index: int, destination: IPAddress | str) -> NeighbourAddRequest:
        return NeighbourAddRequest(self._handle, index, destination)

    def add_bridge(self, index: int, lla: bytes) -> NeighbourAddRequest:
        return NeighbourAddRequest.bridge(self._handle, index, lla)

    def delete(self, message: NeighbourMessage) -> NeighbourDelRequest:
        return NeighbourDelRequest(self._handle, message)