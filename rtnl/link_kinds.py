"""Link builders for MAC VLAN, MAC VTAP, XFRM, VLAN and MACsec interfaces."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable

from .link_builder import LinkMessageBuilder
from .netlink import Attr, InfoKind


def _uint(value: int, bits: int, what: str) -> int:
    number = int(value)
    if not 0 <= number < (1 << bits):
        raise ValueError(f"{what} must fit in {bits} unsigned bits: {value!r}")
    return number


def _int32(value: int, what: str) -> int:
    number = int(value)
    if not -(1 << 31) <= number < (1 << 31):
        raise ValueError(f"{what} must fit in a signed 32-bit integer: {value!r}")
    return number


class MacVlanMode(enum.IntEnum):
    PRIVATE = 1
    VEPA = 2
    BRIDGE = 4
    PASSTHROUGH = 8
    SOURCE = 16


class MacVtapMode(enum.IntEnum):
    PRIVATE = 1
    VEPA = 2
    BRIDGE = 4
    PASSTHROUGH = 8
    SOURCE = 16


class MacSecCipherId(enum.IntEnum):
    GCM_AES_128 = 0x0080_C200_0100_0001
    GCM_AES_256 = 0x0080_C200_0100_0002
    GCM_AES_XPN_128 = 0x0080_C200_0100_0003
    GCM_AES_XPN_256 = 0x0080_C200_0100_0004


class MacSecValidate(enum.IntEnum):
    DISABLED = 0
    CHECK = 1
    STRICT = 2


class MacSecOffload(enum.IntEnum):
    OFF = 0
    PHY = 1
    MAC = 2


@dataclass(frozen=True)
class QosMapping:
    """Maps the internal priority ``from_`` to the VLAN priority ``to``."""

    from_: int
    to: int

    def __post_init__(self) -> None:
        _uint(self.from_, 32, "QoS mapping source")
        _uint(self.to, 32, "QoS mapping target")

    def to_attr(self) -> Attr:
        return Attr("mapping", (self.from_, self.to))


class LinkMacVlan(LinkMessageBuilder):
    """A MAC VLAN interface on top of a base interface."""

    def __init__(self, name: str, base_iface_index: int, mode: MacVlanMode) -> None:
        super().__init__(InfoKind.MACVLAN)
        self.name(name)
        self.link(_uint(base_iface_index, 32, "interface index"))
        self.mode(mode)

    def mode(self, mode: MacVlanMode) -> LinkMacVlan:
        return self.append_info_data(Attr("mode", MacVlanMode(mode)))


class LinkMacVtap(LinkMessageBuilder):
    """A MAC VTAP interface on top of a base interface."""

    def __init__(self, name: str, base_iface_index: int, mode: MacVtapMode) -> None:
        super().__init__(InfoKind.MACVTAP)
        self.name(name)
        self.link(_uint(base_iface_index, 32, "interface index"))
        self.mode(mode)

    def mode(self, mode: MacVtapMode) -> LinkMacVtap:
        return self.append_info_data(Attr("mode", MacVtapMode(mode)))


class LinkXfrm(LinkMessageBuilder):
    """An XFRM interface."""

    def __init__(self, name: str, base_iface_index: int, if_id: int) -> None:
        super().__init__(InfoKind.XFRM)
        self.name(name)
        self.dev(base_iface_index)
        self.if_id(if_id)

    def if_id(self, if_id: int) -> LinkXfrm:
        """``ip link add name NAME type xfrm if_id IF_ID``."""
        return self.append_info_data(Attr("if_id", _uint(if_id, 32, "if_id")))

    def dev(self, iface_index: int) -> LinkXfrm:
        """``ip link add name NAME type xfrm dev PHYS_DEV``, by index."""
        return self.append_info_data(
            Attr("link", _uint(iface_index, 32, "interface index"))
        )


class LinkVlan(LinkMessageBuilder):
    """A VLAN interface on top of a base interface."""

    def __init__(self, name: str, base_iface_index: int, vlan_id: int) -> None:
        super().__init__(InfoKind.VLAN)
        self.name(name)
        self.id(vlan_id)
        self.link(_uint(base_iface_index, 32, "interface index"))

    def id(self, vlan_id: int) -> LinkVlan:
        """Set the VLAN ID."""
        return self.append_info_data(Attr("id", _uint(vlan_id, 16, "VLAN id")))

    def qos(
        self, ingress_qos: Iterable[QosMapping], egress_qos: Iterable[QosMapping]
    ) -> LinkVlan:
        """Set ingress and egress QoS mappings; empty lists are left out."""
        ingress = [mapping.to_attr() for mapping in ingress_qos]
        if ingress:
            self.append_info_data(Attr("ingress_qos", ingress))
        egress = [mapping.to_attr() for mapping in egress_qos]
        if egress:
            self.append_info_data(Attr("egress_qos", egress))
        return self


class LinkMacSec(LinkMessageBuilder):
    """A MACsec interface on top of a base interface."""

    def __init__(self, name: str, base_iface_index: int) -> None:
        super().__init__(InfoKind.MACSEC)
        self.name(name)
        self.link(_uint(base_iface_index, 32, "interface index"))

    def _flag(self, kind: str, enabled: bool) -> LinkMacSec:
        return self.append_info_data(Attr(kind, 1 if enabled else 0))

    def sci(self, sci: int) -> LinkMacSec:
        return self.append_info_data(Attr("sci", _uint(sci, 64, "sci")))

    def port(self, port: int) -> LinkMacSec:
        return self.append_info_data(Attr("port", _uint(port, 16, "port")))

    def icv_len(self, icv_len: int) -> LinkMacSec:
        return self.append_info_data(Attr("icv_len", _uint(icv_len, 8, "icv_len")))

    def cipher_suite(self, cipher_suite: MacSecCipherId) -> LinkMacSec:
        return self.append_info_data(
            Attr("cipher_suite", MacSecCipherId(cipher_suite))
        )

    def window(self, window: int) -> LinkMacSec:
        return self.append_info_data(Attr("window", _uint(window, 32, "window")))

    def encoding_sa(self, encoding_sa: int) -> LinkMacSec:
        return self.append_info_data(
            Attr("encoding_sa", _uint(encoding_sa, 8, "encoding_sa"))
        )

    def encrypt(self, encrypt: bool) -> LinkMacSec:
        return self._flag("encrypt", encrypt)

    def protect(self, protect: bool) -> LinkMacSec:
        return self._flag("protect", protect)

    def inc_sci(self, inc_sci: bool) -> LinkMacSec:
        return self._flag("inc_sci", inc_sci)

    def es(self, es: bool) -> LinkMacSec:
        return self._flag("es", es)

    def scb(self, scb: bool) -> LinkMacSec:
        return self._flag("scb", scb)

    def replay_protect(self, replay_protect: bool) -> LinkMacSec:
        return self._flag("replay_protect", replay_protect)

    def validation(self, validation: MacSecValidate) -> LinkMacSec:
        return self.append_info_data(Attr("validation", MacSecValidate(validation)))

    def offload(self, offload: MacSecOffload) -> LinkMacSec:
        return self.append_info_data(Attr("offload", MacSecOffload(offload)))

    def other(self, other: Attr) -> LinkMacSec:
        """Append an attribute this builder has no setter for."""
        return self.append_info_data(Attr("other", other))