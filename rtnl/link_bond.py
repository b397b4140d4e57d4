"""Link builder for bond interfaces."""

from __future__ import annotations

import enum
import ipaddress
from typing import Iterable

from .link_builder import LinkMessageBuilder
from .netlink import Attr, InfoKind


def _uint(value: int, bits: int, what: str) -> int:
    number = int(value)
    if not 0 <= number < (1 << bits):
        raise ValueError(f"{what} must fit in {bits} unsigned bits: {value!r}")
    return number


class BondMode(enum.IntEnum):
    BALANCE_RR = 0
    ACTIVE_BACKUP = 1
    BALANCE_XOR = 2
    BROADCAST = 3
    IEEE_802_3AD = 4
    BALANCE_TLB = 5
    BALANCE_ALB = 6


class BondArpValidate(enum.IntEnum):
    NONE = 0
    ACTIVE = 1
    BACKUP = 2
    ALL = 3
    FILTER = 4
    FILTER_ACTIVE = 5
    FILTER_BACKUP = 6


class BondArpAllTargets(enum.IntEnum):
    ANY = 0
    ALL = 1


class BondPrimaryReselect(enum.IntEnum):
    ALWAYS = 0
    BETTER = 1
    FAILURE = 2


class BondFailOverMac(enum.IntEnum):
    NONE = 0
    ACTIVE = 1
    FOLLOW = 2


class BondXmitHashPolicy(enum.IntEnum):
    LAYER2 = 0
    LAYER34 = 1
    LAYER23 = 2
    ENCAP23 = 3
    ENCAP34 = 4
    VLAN_SRC_MAC = 5


class LinkBond(LinkMessageBuilder):
    """A bond interface; each setter mirrors an ``ip link add type bond`` option."""

    def __init__(self, name: str) -> None:
        super().__init__(InfoKind.BOND)
        self.name(name)

    def _u8(self, kind: str, value: int) -> LinkBond:
        return self.append_info_data(Attr(kind, _uint(value, 8, kind)))

    def _u16(self, kind: str, value: int) -> LinkBond:
        return self.append_info_data(Attr(kind, _uint(value, 16, kind)))

    def _u32(self, kind: str, value: int) -> LinkBond:
        return self.append_info_data(Attr(kind, _uint(value, 32, kind)))

    def mode(self, mode: BondMode) -> LinkBond:
        """``mode MODE``."""
        return self.append_info_data(Attr("mode", BondMode(mode)))

    def active_port(self, active_port: int) -> LinkBond:
        """``active_slave``, given as the ifindex of an attached interface."""
        return self._u32("active_port", active_port)

    def miimon(self, miimon: int) -> LinkBond:
        return self._u32("miimon", miimon)

    def updelay(self, updelay: int) -> LinkBond:
        return self._u32("updelay", updelay)

    def downdelay(self, downdelay: int) -> LinkBond:
        return self._u32("downdelay", downdelay)

    def use_carrier(self, use_carrier: int) -> LinkBond:
        return self._u8("use_carrier", use_carrier)

    def arp_interval(self, arp_interval: int) -> LinkBond:
        return self._u32("arp_interval", arp_interval)

    def arp_validate(self, arp_validate: BondArpValidate) -> LinkBond:
        return self.append_info_data(
            Attr("arp_validate", BondArpValidate(arp_validate))
        )

    def arp_all_targets(self, arp_all_targets: BondArpAllTargets) -> LinkBond:
        return self.append_info_data(
            Attr("arp_all_targets", BondArpAllTargets(arp_all_targets))
        )

    def primary(self, primary: int) -> LinkBond:
        """``primary``, given as the ifindex of an interface."""
        return self._u32("primary", primary)

    def primary_reselect(self, primary_reselect: BondPrimaryReselect) -> LinkBond:
        return self.append_info_data(
            Attr("primary_reselect", BondPrimaryReselect(primary_reselect))
        )

    def fail_over_mac(self, fail_over_mac: BondFailOverMac) -> LinkBond:
        return self.append_info_data(
            Attr("fail_over_mac", BondFailOverMac(fail_over_mac))
        )

    def xmit_hash_policy(self, xmit_hash_policy: BondXmitHashPolicy) -> LinkBond:
        return self.append_info_data(
            Attr("xmit_hash_policy", BondXmitHashPolicy(xmit_hash_policy))
        )

    def resend_igmp(self, resend_igmp: int) -> LinkBond:
        return self._u32("resend_igmp", resend_igmp)

    def num_peer_notif(self, num_peer_notif: int) -> LinkBond:
        return self._u8("num_peer_notif", num_peer_notif)

    def all_ports_active(self, all_ports_active: int) -> LinkBond:
        """``all_slaves_active``."""
        return self._u8("all_ports_active", all_ports_active)

    def min_links(self, min_links: int) -> LinkBond:
        return self._u32("min_links", min_links)

    def lp_interval(self, lp_interval: int) -> LinkBond:
        return self._u32("lp_interval", lp_interval)

    def packets_per_port(self, packets_per_port: int) -> LinkBond:
        """``packets_per_slave``."""
        return self._u32("packets_per_port", packets_per_port)

    def ad_lacp_rate(self, ad_lacp_rate: int) -> LinkBond:
        return self._u8("ad_lacp_rate", ad_lacp_rate)

    def ad_select(self, ad_select: int) -> LinkBond:
        return self._u8("ad_select", ad_select)

    def ad_actor_sys_prio(self, ad_actor_sys_prio: int) -> LinkBond:
        return self._u16("ad_actor_sys_prio", ad_actor_sys_prio)

    def ad_user_port_key(self, ad_user_port_key: int) -> LinkBond:
        return self._u16("ad_user_port_key", ad_user_port_key)

    def ad_actor_system(self, ad_actor_system: bytes) -> LinkBond:
        """The 6-byte actor system MAC address."""
        system = bytes(ad_actor_system)
        if len(system) != 6:
            raise ValueError(
                f"ad_actor_system must be 6 bytes long, not {len(system)}"
            )
        return self.append_info_data(Attr("ad_actor_system", system))

    def tlb_dynamic_lb(self, tlb_dynamic_lb: int) -> LinkBond:
        return self._u8("tlb_dynamic_lb", tlb_dynamic_lb)

    def peer_notif_delay(self, peer_notif_delay: int) -> LinkBond:
        return self._u32("peer_notif_delay", peer_notif_delay)

    def ad_lacp_active(self, ad_lacp_active: int) -> LinkBond:
        return self._u8("ad_lacp_active", ad_lacp_active)

    def missed_max(self, missed_max: int) -> LinkBond:
        return self._u8("missed_max", missed_max)

    def arp_ip_target(
        self, arp_ip_target: Iterable[ipaddress.IPv4Address | str]
    ) -> LinkBond:
        """``arp_ip_target LIST`` of IPv4 addresses."""
        targets = [ipaddress.IPv4Address(target) for target in arp_ip_target]
        return self.append_info_data(Attr("arp_ip_target", targets))

    def ns_ip6_target(
        self, ns_ip6_target: Iterable[ipaddress.IPv6Address | str]
    ) -> LinkBond:
        """``ns_ip6_target LIST`` of IPv6 addresses."""
        targets = [ipaddress.IPv6Address(target) for target in ns_ip6_target]
        return self.append_info_data(Attr("ns_ip6_target", targets))