"""Requests that create, change, delete and list links."""

from __future__ import annotations

from typing import Any, AsyncIterator, Iterable, Protocol

from .netlink import (
    AddressFamily,
    Attr,
    LinkHeader,
    LinkMessage,
    MessageType,
    NetlinkFlags,
    NetlinkMessage,
    check_error,
    expect_payload,
)


class _Requester(Protocol):
    def request(self, message: NetlinkMessage) -> AsyncIterator[NetlinkMessage]:
        ...


async def _send(
    handle: _Requester, message_type: MessageType, payload: Any, flags: int
) -> None:
    request = NetlinkMessage(message_type, payload, NetlinkFlags(flags))
    async for reply in handle.request(request):
        check_error(reply)


def _prop_list(alt_ifnames: Iterable[str]) -> Attr:
    return Attr("prop_list", [Attr("alt_ifname", str(name)) for name in alt_ifnames])


class LinkAddRequest:
    """Create a link (``ip link add``)."""

    def __init__(self, handle: _Requester, message: LinkMessage) -> None:
        self._handle = handle
        self.message = message
        self.flags = (
            NetlinkFlags.REQUEST
            | NetlinkFlags.ACK
            | NetlinkFlags.CREATE
            | NetlinkFlags.EXCL
        )

    def replace(self) -> LinkAddRequest:
        """Replace an existing matching link."""
        self.flags = (self.flags & ~NetlinkFlags.EXCL) | NetlinkFlags.REPLACE
        return self

    def set_flags(self, flags: int) -> LinkAddRequest:
        """Use arbitrary netlink header flags."""
        self.flags = NetlinkFlags(flags)
        return self

    async def execute(self) -> None:
        await _send(self._handle, MessageType.NEWLINK, self.message, self.flags)


class LinkDelRequest:
    """Delete the link with a given index."""

    def __init__(self, handle: _Requester, index: int) -> None:
        self._handle = handle
        self.message = LinkMessage(header=LinkHeader(index=index))

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.DELLINK,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.ACK,
        )


class LinkSetRequest:
    """Change an existing link (``ip link set``)."""

    def __init__(self, handle: _Requester, message: LinkMessage) -> None:
        self._handle = handle
        self.message = message

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.SETLINK,
            self.message,
            NetlinkFlags.REQUEST
            | NetlinkFlags.ACK
            | NetlinkFlags.EXCL
            | NetlinkFlags.CREATE,
        )


class LinkGetRequest:
    """List links, or fetch one link by index or name."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle
        self.message = LinkMessage()
        # A dump fetches every link; a lookup by index or name fetches one.
        self.dump = True

    def set_filter_mask(
        self, family: AddressFamily, filter_mask: Iterable[int]
    ) -> LinkGetRequest:
        self.message.header.interface_family = family
        self.message.attributes.append(Attr("ext_mask", list(filter_mask)))
        return self

    def match_index(self, index: int) -> LinkGetRequest:
        self.dump = False
        self.message.header.index = index
        return self

    def match_name(self, name: str) -> LinkGetRequest:
        self.dump = False
        self.message.attributes.append(Attr("ifname", name))
        return self

    async def execute(self) -> AsyncIterator[LinkMessage]:
        """Yield the link messages the kernel returns."""
        flags = NetlinkFlags.REQUEST
        if self.dump:
            flags |= NetlinkFlags.DUMP
        request = NetlinkMessage(MessageType.GETLINK, self.message, flags)
        async for reply in self._handle.request(request):
            yield expect_payload(reply, MessageType.NEWLINK)


class LinkNewPropRequest:
    """Add properties to a link (``ip link property add``)."""

    def __init__(self, handle: _Requester, index: int) -> None:
        self._handle = handle
        self.message = LinkMessage(header=LinkHeader(index=index))

    def alt_ifname(self, alt_ifnames: Iterable[str]) -> LinkNewPropRequest:
        """Add alternative names to the link."""
        self.message.attributes.append(_prop_list(alt_ifnames))
        return self

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.NEWLINKPROP,
            self.message,
            NetlinkFlags.REQUEST
            | NetlinkFlags.ACK
            | NetlinkFlags.EXCL
            | NetlinkFlags.CREATE
            | NetlinkFlags.APPEND,
        )


class LinkDelPropRequest:
    """Remove properties from a link (``ip link property del``)."""

    def __init__(self, handle: _Requester, index: int) -> None:
        self._handle = handle
        self.message = LinkMessage(header=LinkHeader(index=index))

    def alt_ifname(self, alt_ifnames: Iterable[str]) -> LinkDelPropRequest:
        """Remove alternative names from the link."""
        self.message.attributes.append(_prop_list(alt_ifnames))
        return self

    async def execute(self) -> None:
        await _send(
            self._handle,
            MessageType.DELLINKPROP,
            self.message,
            NetlinkFlags.REQUEST | NetlinkFlags.ACK,
        )


class LinkHandle:
    """Entry point for link requests (``ip link``)."""

    def __init__(self, handle: _Requester) -> None:
        self._handle = handle

    def set(self, message: LinkMessage) -> LinkSetRequest:
        return LinkSetRequest(self._handle, message)

    def add(self, message: LinkMessage) -> LinkAddRequest:
        return LinkAddRequest(self._handle, message)

    def property_add(self, index: int) -> LinkNewPropRequest:
        return LinkNewPropRequest(self._handle, index)

    def property_del(self, index: int) -> LinkDelPropRequest:
        return LinkDelPropRequest(self._handle, index)

    def delete(self, index: int) -> LinkDelRequest:
        return LinkDelRequest(self._handle, index)

    def get(self) -> LinkGetRequest:
        return LinkGetRequest(self._handle)

    def set_port(self, message: LinkMessage) -> LinkAddRequest:
        """Change bond or bridge port settings (RTM_NEWLINK without create)."""
        return LinkAddRequest(self._handle, message).set_flags(
            NetlinkFlags.REQUEST | NetlinkFlags.ACK
        )