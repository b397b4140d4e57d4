"""Requests that add, delete and list interface addresses."""

from __future__ import annotations

import ipaddress
from typing import Any, AsyncIterator, Protocol, Union

from .netlink import (
    AddressFamily,
    AddressHeader,
    AddressMessage,
    Attr,
    MessageType,
    NetlinkFlags,
    NetlinkMessage,
    check_error,
    expect_payload,
)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_VERSION_OF_FAMILY = {AddressFamily.INET: 4, AddressFamily.INET6: 6}
_FAMILY_OF_VERSION = {4: AddressFamily.INET, 6: AddressFamily.INET6}


class _Requester(Protocol):
    def request(self, message: NetlinkMessage) -> AsyncIterator[NetlinkMessage]:
        ...


async def _send(
    handle: _Requester, message_type: MessageType, payload: Any, flags: int
) -> None:
    request = NetlinkMessage(message_type, payload, NetlinkFlags(flags))
    async for reply in handle.request(request):
        check_error(reply)


class AddressMessageBuilder:
    """Build an AddressMessage for IPv4 (the default) or IPv6 addresses."""

    def __init__(self, family: AddressFamily = AddressFamily.INET) -> None:
        if family not in _VERSION_OF_FAMILY:
            raise ValueError(f"unsupported address family: {family!r}")
        self._message = AddressMessage(header=AddressHeader(family=family))

    @property
    def version(self) -> int:
        return _VERSION_OF_FAMILY[self._message.header.family]

    def index(self, index: int) -> AddressMessageBuilder:
        """Set the interface index."""
        self._message.header.index = index
        return self

    def address(
        self, address: IPAddress | str, prefix_len: int
    ) -> AddressMessageBuilder:
        """Set the address and prefix length."""
        ip = ipaddress.ip_address(address)
        if ip.version != self.version:
            raise ValueError(
                f"IPv{ip.version} address given to an IPv{self.version} builder"
            )
        if not 0 <= prefix_len <= ip.max_prefixlen:
            raise ValueError(f"invalid prefix length: {prefix_len}")
        self._message.header.prefix_len = prefix_len
        attributes = self._message.attributes

        if ip.version == 4:
            if not ip.is_multicast:
                # IFA_LOCAL may hold the same value as IFA_ADDRESS.
                attributes.append(Attr("address", ip))
                attributes.append(Attr("local", ip))
                if prefix_len == 32:
                    broadcast = ip
                else:
                    broadcast = ipaddress.IPv4Address(
                        (0xFFFF_FFFF >> prefix_len) | int(ip)
                    )
                attributes.append(Attr("broadcast", broadcast))
        elif ip.is_multicast:
            attributes.append(Attr("multicast", ip))
        else:
            attributes.append(Attr("address", ip))
            attributes.append(Attr("local", ip))
        return self

    def build(self) -> AddressMessage:
        return self._message


class AddressAddRequest:
    """Add an address to an interface (``ip address add``)."""

    def __init__(
        self,
        handle: _Requester,
        index: int,
        address: IPAddress | str,
        prefix_len: int,
    ) -> None:
        ip = ipaddress.ip_address(address)
        self._handle = handle
        self.message = (
            AddressMessageBuilder(_FAMILY_OF_VERSION[ip.version])
            .index(index)
            .address(ip, prefix_len)
            .build()
        )
        self._replace = False

    def replace(self) -> AddressAddRequest:
        """Replace an existing matching address."""
        self._replace = True
        return self

    @property
    def flags(self) -> NetlinkFlags:
        mode = NetlinkFlags.REPLACE if self._replace else NetlinkFlags.EXCL
        return NetlinkFlags.REQUEST | NetlinkFlags.ACK | mode | NetlinkFlags.CREATE

    async def execute(self) -> None:
        await _send(self._handle, MessageType.NEWADDR, self.message, self.flags)


class AddressDelRequest:
    """Delete the address described by a message."""

    def __init__(self, handle: _Requester, message: AddressMessage) -> None:
        self._handle = handle
        self.message = message

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.DELADDR,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.ACK,
        )


class AddressGetRequest:
    """List addresses, optionally filtered on this side of the socket."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle
        self.message = AddressMessage()
        self._index: int | None = None
        self._prefix_len: int | None = None
        self._address: IPAddress | None = None

    def set_link_index_filter(self, index: int) -> AddressGetRequest:
        """Keep only the addresses of the given interface."""
        self._index = index
        return self

    def set_prefix_length_filter(self, prefix: int) -> AddressGetRequest:
        """Keep only the addresses with the given prefix length."""
        self._prefix_len = prefix
        return self

    def set_address_filter(self, address: IPAddress | str) -> AddressGetRequest:
        """Keep only the messages that carry the given address."""
        self._address = ipaddress.ip_address(address)
        return self

    def _matches(self, message: AddressMessage) -> bool:
        if self._index is not None and message.header.index != self._index:
            return False
        if (
            self._prefix_len is not None
            and message.header.prefix_len != self._prefix_len
        ):
            return False
        if self._address is not None:
            return any(
                attr.kind in ("address", "local", "multicast", "anycast")
                and attr.value == self._address
                for attr in message.attributes
            )
        return True

    async def execute(self) -> AsyncIterator[AddressMessage]:
        """Yield the address messages that pass the filters."""
        request = NetlinkMessage(
            MessageType.GETADDR,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.DUMP,
        )
        async for reply in self._handle.request(request):
            message = expect_payload(reply, MessageType.NEWADDR)
            if self._matches(message):
                yield message


class AddressHandle:
    """Entry point for address requests (``ip address``)."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle

    def get(self) -> AddressGetRequest:
        return AddressGetRequest(self._handle)

    def add(
        self, index: int, address: IPAddress | str, prefix_len: int
    ) -> AddressAddRequest:
        return AddressAddRequest(self._handle, index, address, prefix_len)

    def delete(self, message: AddressMessage) -> AddressDelRequest:
        return AddressDelRequest(self._handle, message)