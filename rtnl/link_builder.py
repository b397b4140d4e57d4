"""Builders for link messages, plus the simple link kinds."""

from __future__ import annotations

import dataclasses
from typing import Any

from .netlink import (
    Attr,
    InfoKind,
    InfoPortKind,
    LinkFlags,
    LinkHeader,
    LinkMessage,
)


class LinkMessageBuilder:
    """Build a LinkMessage step by step.

    Every setter changes the builder in place and returns it, so calls
    can be chained. Kind-specific builders subclass this one.
    """

    def __init__(self, info_kind: InfoKind | None = None) -> None:
        self.header = LinkHeader()
        self.info_kind: InfoKind | None = info_kind
        self.info_data: list[Attr] | None = None
        self.port_kind: InfoPortKind | None = None
        self.port_data: list[Attr] | None = None
        self._extra_attributes: list[Attr] = []

    def set_header(self, header: LinkHeader) -> LinkMessageBuilder:
        """Use an arbitrary link header."""
        self.header = header
        return self

    def append_extra_attribute(self, attr: Attr) -> LinkMessageBuilder:
        """Append an arbitrary link attribute."""
        self._extra_attributes.append(attr)
        return self

    def set_info_data(self, info_data: list[Attr]) -> LinkMessageBuilder:
        """Replace the kind-specific link data."""
        self.info_data = list(info_data)
        return self

    def append_info_data(self, info: Attr) -> LinkMessageBuilder:
        """Append one entry to the kind-specific link data."""
        if self.info_data is None:
            self.info_data = []
        self.info_data.append(info)
        return self

    def up(self) -> LinkMessageBuilder:
        """Set the link up (``ip link set dev DEV up``)."""
        self.header.flags |= LinkFlags.UP
        self.header.change_mask |= LinkFlags.UP
        return self

    def down(self) -> LinkMessageBuilder:
        """Set the link down (``ip link set dev DEV down``)."""
        self.header.flags &= ~LinkFlags.UP
        self.header.change_mask |= LinkFlags.UP
        return self

    def promiscuous(self, enable: bool) -> LinkMessageBuilder:
        """Turn promiscuous mode on or off."""
        if enable:
            self.header.flags |= LinkFlags.PROMISC
        else:
            self.header.flags &= ~LinkFlags.PROMISC
        self.header.change_mask |= LinkFlags.PROMISC
        return self

    def arp(self, enable: bool) -> LinkMessageBuilder:
        """Turn the ARP protocol on or off."""
        if enable:
            self.header.flags &= ~LinkFlags.NOARP
        else:
            self.header.flags |= LinkFlags.NOARP
        self.header.change_mask |= LinkFlags.NOARP
        return self

    def name(self, name: str) -> LinkMessageBuilder:
        return self.append_extra_attribute(Attr("ifname", name))

    def mtu(self, mtu: int) -> LinkMessageBuilder:
        """Set the MTU (``ip link set DEV mtu MTU``)."""
        return self.append_extra_attribute(Attr("mtu", mtu))

    def index(self, index: int) -> LinkMessageBuilder:
        """Kernel index of an existing interface."""
        self.header.index = index
        return self

    def address(self, address: bytes) -> LinkMessageBuilder:
        """Set the hardware address."""
        return self.append_extra_attribute(Attr("address", bytes(address)))

    def setns_by_pid(self, pid: int) -> LinkMessageBuilder:
        """Move the device into the network namespace of a process."""
        return self.append_extra_attribute(Attr("net_ns_pid", pid))

    def setns_by_fd(self, fd: int) -> LinkMessageBuilder:
        """Move the device into the namespace behind a file descriptor."""
        return self.append_extra_attribute(Attr("net_ns_fd", fd))

    def link(self, index: int) -> LinkMessageBuilder:
        """The physical device to operate on, such as a VLAN's parent."""
        return self.append_extra_attribute(Attr("link", index))

    def controller(self, ctrl_index: int) -> LinkMessageBuilder:
        """Attach to a controller interface (``ip link set NAME master``)."""
        return self.append_extra_attribute(Attr("controller", ctrl_index))

    def nocontroller(self) -> LinkMessageBuilder:
        """Detach from the controller (``ip link set LINK nomaster``)."""
        return self.append_extra_attribute(Attr("controller", 0))

    def set_port_kind(self, port_kind: InfoPortKind) -> LinkMessageBuilder:
        self.port_kind = port_kind
        return self

    def set_port_data(self, port_data: list[Attr]) -> LinkMessageBuilder:
        """Include port settings."""
        self.port_data = list(port_data)
        return self

    def build(self) -> LinkMessage:
        attributes = list(self._extra_attributes)
        link_infos: list[Attr] = []
        if self.info_kind is not None:
            link_infos.append(Attr("kind", self.info_kind))
        if self.info_data is not None:
            link_infos.append(Attr("data", list(self.info_data)))
        if self.port_kind is not None:
            link_infos.append(Attr("port_kind", self.port_kind))
        if self.port_data is not None:
            link_infos.append(Attr("port_data", list(self.port_data)))
        if link_infos:
            attributes.append(Attr("link_info", link_infos))
        return LinkMessage(
            header=dataclasses.replace(self.header), attributes=attributes
        )


class LinkUnspec(LinkMessageBuilder):
    """A link of no particular kind, matched by index or name."""

    def __init__(self) -> None:
        super().__init__()

    @classmethod
    def with_index(cls, index: int) -> LinkUnspec:
        builder = cls()
        builder.index(index)
        return builder

    @classmethod
    def with_name(cls, name: str) -> LinkUnspec:
        builder = cls()
        builder.name(name)
        return builder


class LinkBridge(LinkMessageBuilder):
    """A Linux bridge, created up."""

    def __init__(self, name: str) -> None:
        super().__init__(InfoKind.BRIDGE)
        self.name(name)
        self.up()


class LinkDummy(LinkMessageBuilder):
    """A dummy interface."""

    def __init__(self, name: str) -> None:
        super().__init__(InfoKind.DUMMY)
        self.name(name)


class LinkWireguard(LinkMessageBuilder):
    """A WireGuard interface."""

    def __init__(self, name: str) -> None:
        super().__init__(InfoKind.WIREGUARD)
        self.name(name)


class LinkVeth(LinkMessageBuilder):
    """A virtual ethernet pair."""

    def __init__(self, name: str, peer: str) -> None:
        super().__init__(InfoKind.VETH)
        self.name(name)
        self.peer(peer)

    def peer(self, peer: str) -> LinkVeth:
        """Name the other end of the pair."""
        peer_message = LinkUnspec().name(peer).build()
        self.info_data = [Attr("peer", peer_message)]
        return self


class LinkVrf(LinkMessageBuilder):
    """A VRF interface bound to a routing table."""

    def __init__(self, name: str, table_id: int) -> None:
        super().__init__(InfoKind.VRF)
        self.name(name)
        self.table_id(table_id)

    def table_id(self, table_id: int) -> LinkVrf:
        return self.append_info_data(Attr("table_id", table_id))


class LinkBondPort(LinkMessageBuilder):
    """Settings of an interface attached to a bond."""

    def __init__(self, port_index: int) -> None:
        super().__init__()
        self.index(port_index)
        self.set_port_kind(InfoPortKind.BOND)

    def append_info_data(self, info: Attr) -> LinkBondPort:
        """Append one entry to the bond port data."""
        if self.port_data is None:
            self.port_data = []
        self.port_data.append(info)
        return self

    def queue_id(self, queue_id: int) -> LinkBondPort:
        """``ip link set name NAME type bond_slave queue_id QUEUE_ID``."""
        return self.append_info_data(Attr("queue_id", queue_id))

    def prio(self, prio: int) -> LinkBondPort:
        """``ip link set name NAME type bond_slave prio PRIO``."""
        return self.append_info_data(Attr("prio", prio))


def _link_info(message: LinkMessage) -> Any:
    """Return the link_info value of a message, or None."""
    return next(
        (attr.value for attr in message.attributes if attr.kind == "link_info"),
        None,
    )