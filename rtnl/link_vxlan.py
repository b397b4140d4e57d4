"""Link builder for VXLAN interfaces."""

from __future__ import annotations

import ipaddress

from .link_builder import LinkMessageBuilder
from .netlink import Attr, InfoKind


def _uint(value: int, bits: int, what: str) -> int:
    number = int(value)
    if not 0 <= number < (1 << bits):
        raise ValueError(f"{what} must fit in {bits} unsigned bits: {value!r}")
    return number


class LinkVxlan(LinkMessageBuilder):
    """A VXLAN interface with a given VNI."""

    def __init__(self, name: str, vni: int) -> None:
        super().__init__(InfoKind.VXLAN)
        self.name(name)
        self.id(vni)

    def id(self, vni: int) -> LinkVxlan:
        """Set the VNI."""
        return self.append_info_data(Attr("id", _uint(vni, 32, "VNI")))

    def dev(self, index: int) -> LinkVxlan:
        """Physical device for tunnel endpoint communication, by index.

        The generic ``link()`` setter does not work for VXLAN.
        """
        return self.append_info_data(Attr("link", _uint(index, 32, "interface index")))

    def port(self, port: int) -> LinkVxlan:
        """UDP destination port of the remote tunnel endpoint."""
        return self.append_info_data(Attr("port", _uint(port, 16, "port")))

    def group(self, addr: ipaddress.IPv4Address | str) -> LinkVxlan:
        """IPv4 multicast group to join; exclusive with ``remote``."""
        return self.append_info_data(Attr("group", ipaddress.IPv4Address(addr)))

    def group6(self, addr: ipaddress.IPv6Address | str) -> LinkVxlan:
        """IPv6 multicast group to join; exclusive with ``remote6``."""
        return self.append_info_data(Attr("group6", ipaddress.IPv6Address(addr)))

    def remote(self, addr: ipaddress.IPv4Address | str) -> LinkVxlan:
        """IPv4 unicast destination; shares the group attribute."""
        return self.group(addr)

    def remote6(self, addr: ipaddress.IPv6Address | str) -> LinkVxlan:
        """IPv6 unicast destination; shares the group6 attribute."""
        return self.group6(addr)

    def local(self, addr: ipaddress.IPv4Address | str) -> LinkVxlan:
        """IPv4 source address of outgoing packets."""
        return self.append_info_data(Attr("local", ipaddress.IPv4Address(addr)))

    def local6(self, addr: ipaddress.IPv6Address | str) -> LinkVxlan:
        """IPv6 source address of outgoing packets."""
        return self.append_info_data(Attr("local6", ipaddress.IPv6Address(addr)))

    def tos(self, tos: int) -> LinkVxlan:
        return self.append_info_data(Attr("tos", _uint(tos, 8, "tos")))

    def ttl(self, ttl: int) -> LinkVxlan:
        return self.append_info_data(Attr("ttl", _uint(ttl, 8, "ttl")))

    def label(self, label: int) -> LinkVxlan:
        """Flow label of outgoing packets."""
        return self.append_info_data(Attr("label", _uint(label, 32, "label")))

    def learning(self, learning: bool) -> LinkVxlan:
        return self.append_info_data(Attr("learning", bool(learning)))

    def ageing(self, seconds: int) -> LinkVxlan:
        """Lifetime in seconds of learnt FDB entries."""
        return self.append_info_data(Attr("ageing", _uint(seconds, 32, "ageing")))

    def limit(self, limit: int) -> LinkVxlan:
        """Maximum number of FDB entries."""
        return self.append_info_data(Attr("limit", _uint(limit, 32, "limit")))

    def port_range(self, low: int, high: int) -> LinkVxlan:
        """Range of UDP source ports."""
        return self.append_info_data(
            Attr("port_range", (_uint(low, 16, "port"), _uint(high, 16, "port")))
        )

    def proxy(self, proxy: bool) -> LinkVxlan:
        return self.append_info_data(Attr("proxy", bool(proxy)))

    def rsc(self, rsc: bool) -> LinkVxlan:
        """Route short circuit."""
        return self.append_info_data(Attr("rsc", bool(rsc)))

    def l2miss(self, l2miss: bool) -> LinkVxlan:
        return self.append_info_data(Attr("l2miss", bool(l2miss)))

    def l3miss(self, l3miss: bool) -> LinkVxlan:
        return self.append_info_data(Attr("l3miss", bool(l3miss)))

    def collect_metadata(self, collect_metadata: bool) -> LinkVxlan:
        return self.append_info_data(Attr("collect_metadata", bool(collect_metadata)))

    def udp_csum(self, udp_csum: bool) -> LinkVxlan:
        """Compute UDP checksums for packets sent over IPv4."""
        return self.append_info_data(Attr("udp_csum", bool(udp_csum)))