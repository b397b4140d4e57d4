"""Route netlink message model and reply checking."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Any, Iterable

from .errors import NetlinkError, UnexpectedMessageError


class NetlinkFlags(enum.IntFlag):
    """Flags of the netlink message header."""

    REQUEST = 0x1
    MULTI = 0x2
    ACK = 0x4
    ECHO = 0x8
    DUMP_INTR = 0x10
    DUMP_FILTERED = 0x20
    REPLACE = 0x100
    EXCL = 0x200
    CREATE = 0x400
    APPEND = 0x800
    ROOT = 0x100
    MATCH = 0x200
    ATOMIC = 0x400
    DUMP = 0x300


class MessageType(enum.IntEnum):
    """Netlink control and rtnetlink message types."""

    NOOP = 1
    ERROR = 2
    DONE = 3
    OVERRUN = 4
    NEWLINK = 16
    DELLINK = 17
    GETLINK = 18
    SETLINK = 19
    NEWADDR = 20
    DELADDR = 21
    GETADDR = 22
    NEWROUTE = 24
    DELROUTE = 25
    GETROUTE = 26
    NEWNEIGH = 28
    DELNEIGH = 29
    GETNEIGH = 30
    NEWRULE = 32
    DELRULE = 33
    GETRULE = 34
    NEWQDISC = 36
    DELQDISC = 37
    GETQDISC = 38
    NEWLINKPROP = 108
    DELLINKPROP = 109
    GETLINKPROP = 110


class AddressFamily(enum.IntEnum):
    UNSPEC = 0
    UNIX = 1
    INET = 2
    BRIDGE = 7
    INET6 = 10
    NETLINK = 16
    PACKET = 17
    MPLS = 28


class LinkFlags(enum.IntFlag):
    """Interface flags (IFF_*)."""

    UP = 0x1
    BROADCAST = 0x2
    DEBUG = 0x4
    LOOPBACK = 0x8
    POINTOPOINT = 0x10
    NOTRAILERS = 0x20
    RUNNING = 0x40
    NOARP = 0x80
    PROMISC = 0x100
    ALLMULTI = 0x200
    CONTROLLER = 0x400
    PORT = 0x800
    MULTICAST = 0x1000
    PORTSEL = 0x2000
    AUTOMEDIA = 0x4000
    DYNAMIC = 0x8000
    LOWERUP = 0x10000
    DORMANT = 0x20000
    ECHO = 0x40000


class NeighbourState(enum.IntFlag):
    """Neighbour cache entry states (NUD_*)."""

    NONE = 0x0
    INCOMPLETE = 0x1
    REACHABLE = 0x2
    STALE = 0x4
    DELAY = 0x8
    PROBE = 0x10
    FAILED = 0x20
    NOARP = 0x40
    PERMANENT = 0x80


class NeighbourFlags(enum.IntFlag):
    """Neighbour cache entry flags (NTF_*)."""

    USE = 0x1
    SELF = 0x2
    CONTROLLER = 0x4
    PROXY = 0x8
    EXT_LEARNED = 0x10
    OFFLOADED = 0x20
    STICKY = 0x40
    ROUTER = 0x80


class RouteType(enum.IntEnum):
    UNSPEC = 0
    UNICAST = 1
    LOCAL = 2
    BROADCAST = 3
    ANYCAST = 4
    MULTICAST = 5
    BLACKHOLE = 6
    UNREACHABLE = 7
    PROHIBIT = 8
    THROW = 9
    NAT = 10
    EXTERNAL_RESOLVE = 11


class InfoKind(str, enum.Enum):
    """Link kinds as named in IFLA_INFO_KIND."""

    DUMMY = "dummy"
    IFB = "ifb"
    BRIDGE = "bridge"
    TUN = "tun"
    NLMON = "nlmon"
    VLAN = "vlan"
    VETH = "veth"
    VXLAN = "vxlan"
    BOND = "bond"
    IPVLAN = "ipvlan"
    MACVLAN = "macvlan"
    MACVTAP = "macvtap"
    GRETAP = "gretap"
    IP6GRETAP = "ip6gretap"
    IPIP = "ipip"
    SIT = "sit"
    GRE = "gre"
    IP6GRE = "ip6gre"
    VTI = "vti"
    VRF = "vrf"
    GTP = "gtp"
    IPOIB = "ipoib"
    WIREGUARD = "wireguard"
    XFRM = "xfrm"
    MACSEC = "macsec"
    HSR = "hsr"
    GENEVE = "geneve"


class InfoPortKind(str, enum.Enum):
    """Port kinds as named in IFLA_INFO_SLAVE_KIND."""

    BOND = "bond"
    BRIDGE = "bridge"


@dataclass(frozen=True)
class Attr:
    """A netlink attribute: a kind tag and its value.

    Kinds used by this package include ``ifname``, ``mtu``, ``address``,
    ``link``, ``controller``, ``net_ns_pid``, ``net_ns_fd``, ``link_info``,
    ``ext_mask``, ``prop_list``, ``alt_ifname``, ``local``, ``broadcast``,
    ``multicast``, ``anycast``, ``destination`` and ``link_local_address``.
    """

    kind: str
    value: Any = None


@dataclass
class LinkHeader:
    interface_family: AddressFamily = AddressFamily.UNSPEC
    index: int = 0
    link_layer_type: int = 0
    flags: LinkFlags = LinkFlags(0)
    change_mask: LinkFlags = LinkFlags(0)


@dataclass
class LinkMessage:
    header: LinkHeader = field(default_factory=LinkHeader)
    attributes: list[Attr] = field(default_factory=list)


@dataclass
class AddressHeader:
    family: AddressFamily = AddressFamily.UNSPEC
    prefix_len: int = 0
    flags: int = 0
    scope: int = 0
    index: int = 0


@dataclass
class AddressMessage:
    header: AddressHeader = field(default_factory=AddressHeader)
    attributes: list[Attr] = field(default_factory=list)


@dataclass
class NeighbourHeader:
    family: AddressFamily = AddressFamily.UNSPEC
    ifindex: int = 0
    state: NeighbourState = NeighbourState.NONE
    flags: NeighbourFlags = NeighbourFlags(0)
    kind: RouteType = RouteType.UNSPEC


@dataclass
class NeighbourMessage:
    header: NeighbourHeader = field(default_factory=NeighbourHeader)
    attributes: list[Attr] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorMessage:
    """A netlink error reply; a code of zero is an acknowledgement."""

    code: int = 0
    header: bytes = b""

    @property
    def errno(self) -> int:
        return -self.code

    def to_os_error(self) -> OSError:
        return OSError(self.errno, os.strerror(self.errno))

    def __str__(self) -> str:
        if self.code == 0:
            return "Acknowledgement"
        return f"{os.strerror(self.errno)} (os error {self.errno})"


@dataclass
class NetlinkMessage:
    """A netlink message: its type, header flags and payload."""

    message_type: int
    payload: Any = None
    flags: NetlinkFlags = NetlinkFlags(0)
    sequence_number: int = 0
    port_number: int = 0

    def is_error(self) -> bool:
        """True when the payload is an error other than an acknowledgement."""
        return isinstance(self.payload, ErrorMessage) and self.payload.code != 0


def expect_payload(message: NetlinkMessage, message_type: int) -> Any:
    """Return the payload of ``message`` if it has the expected type.

    Raises NetlinkError for an error reply and UnexpectedMessageError for
    any other kind of message.
    """
    if message.is_error():
        raise NetlinkError(message.payload)
    if message.message_type == message_type and not isinstance(
        message.payload, ErrorMessage
    ):
        return message.payload
    raise UnexpectedMessageError(message)


def check_error(message: NetlinkMessage) -> None:
    """Raise NetlinkError if ``message`` carries an error."""
    if message.is_error():
        raise NetlinkError(message.payload)


def find_attr(attributes: Iterable[Attr], kind: str) -> Attr | None:
    """Return the first attribute of the given kind, or None."""
    return next((attr for attr in attributes if attr.kind == kind), None)