import pytest

from rtnl.errors import NetlinkError
from rtnl.link_kinds import (
    LinkMacSec,
    LinkMacVlan,
    LinkMacVtap,
    LinkVlan,
    LinkXfrm,
    MacSecCipherId,
    MacSecOffload,
    MacSecValidate,
    MacVlanMode,
    MacVtapMode,
    QosMapping,
)
from rtnl.link_requests import LinkHandle
from rtnl.netlink import (
    Attr,
    ErrorMessage,
    InfoKind,
    LinkFlags,
    MessageType,
    NetlinkFlags,
    NetlinkMessage,
)


class _FakeHandle:
    def __init__(self, replies=()):
        self.sent = []
        self.replies = list(replies)

    async def request(self, message):
        self.sent.append(message)
        for reply in self.replies:
            yield reply


def _has_nla(message, nla):
    return any(attr == nla for attr in message.attributes)


def _link_info(message):
    return next(a.value for a in message.attributes if a.kind == "link_info")


def test_macvlan_message_like_create_get_delete_macvlan():
    mac_address = bytes([2, 0, 0, 0, 0, 1])
    message = (
        LinkMacVlan("mvlan1", 2, MacVlanMode.BRIDGE).address(mac_address).build()
    )
    assert _has_nla(message, Attr("ifname", "mvlan1"))
    assert _has_nla(message, Attr("link", 2))
    assert _has_nla(message, Attr("address", mac_address))
    assert _link_info(message) == [
        Attr("kind", InfoKind.MACVLAN),
        Attr("data", [Attr("mode", MacVlanMode.BRIDGE)]),
    ]


@pytest.mark.asyncio
async def test_macvlan_add_request_sends_newlink():
    fake = _FakeHandle([NetlinkMessage(MessageType.ERROR, ErrorMessage(0))])
    message = LinkMacVlan("mvlan1", 2, MacVlanMode.BRIDGE).build()
    await LinkHandle(fake).add(message).execute()
    assert len(fake.sent) == 1
    sent = fake.sent[0]
    assert sent.message_type == MessageType.NEWLINK
    assert sent.payload is message
    assert sent.flags & NetlinkFlags.CREATE


@pytest.mark.asyncio
async def test_macvlan_add_request_raises_on_error_reply():
    fake = _FakeHandle([NetlinkMessage(MessageType.ERROR, ErrorMessage(-17))])
    message = LinkMacVlan("mvlan1", 2, MacVlanMode.BRIDGE).build()
    with pytest.raises(NetlinkError):
        await LinkHandle(fake).add(message).execute()


def test_macvtap_message():
    message = LinkMacVtap("test_macvtap", 3, MacVtapMode.BRIDGE).up().build()
    assert message.attributes[:2] == [Attr("ifname", "test_macvtap"), Attr("link", 3)]
    assert _link_info(message) == [
        Attr("kind", InfoKind.MACVTAP),
        Attr("data", [Attr("mode", MacVtapMode.BRIDGE)]),
    ]
    assert message.header.flags & LinkFlags.UP


def test_xfrm_message_keeps_dev_before_if_id():
    message = LinkXfrm("my-xfrm", 9, 0x08).build()
    assert _has_nla(message, Attr("ifname", "my-xfrm"))
    assert _link_info(message) == [
        Attr("kind", InfoKind.XFRM),
        Attr("data", [Attr("link", 9), Attr("if_id", 0x08)]),
    ]


def test_vlan_message_with_qos():
    message = (
        LinkVlan("vlan100", 10, 100)
        .qos([QosMapping(1, 2)], [QosMapping(3, 4), QosMapping(5, 6)])
        .build()
    )
    assert _has_nla(message, Attr("link", 10))
    data = _link_info(message)[1].value
    assert data == [
        Attr("id", 100),
        Attr("ingress_qos", [Attr("mapping", (1, 2))]),
        Attr("egress_qos", [Attr("mapping", (3, 4)), Attr("mapping", (5, 6))]),
    ]


def test_vlan_empty_qos_lists_are_left_out():
    message = LinkVlan("vlan100", 10, 100).qos([], []).build()
    assert _link_info(message)[1].value == [Attr("id", 100)]


def test_vlan_only_egress_qos():
    message = LinkVlan("vlan100", 10, 100).qos([], [QosMapping(7, 1)]).build()
    kinds = [attr.kind for attr in _link_info(message)[1].value]
    assert kinds == ["id", "egress_qos"]


def test_vlan_id_out_of_range():
    with pytest.raises(ValueError):
        LinkVlan("vlan100", 10, 70000)


def test_qos_mapping_rejects_negative():
    with pytest.raises(ValueError):
        QosMapping(-1, 2)


def test_macsec_message_and_bool_encoding():
    message = (
        LinkMacSec("macsec0", 10)
        .port(11)
        .cipher_suite(MacSecCipherId.GCM_AES_128)
        .encrypt(True)
        .protect(False)
        .replay_protect(True)
        .validation(MacSecValidate.STRICT)
        .offload(MacSecOffload.MAC)
        .build()
    )
    assert _has_nla(message, Attr("link", 10))
    info = _link_info(message)
    assert info[0] == Attr("kind", InfoKind.MACSEC)
    assert info[1].value == [
        Attr("port", 11),
        Attr("cipher_suite", MacSecCipherId.GCM_AES_128),
        Attr("encrypt", 1),
        Attr("protect", 0),
        Attr("replay_protect", 1),
        Attr("validation", MacSecValidate.STRICT),
        Attr("offload", MacSecOffload.MAC),
    ]


def test_macsec_flags_and_other():
    extra = Attr("raw", b"\x01")
    message = (
        LinkMacSec("macsec0", 10)
        .sci(5)
        .icv_len(16)
        .window(32)
        .encoding_sa(1)
        .inc_sci(True)
        .es(False)
        .scb(True)
        .other(extra)
        .build()
    )
    assert _link_info(message)[1].value == [
        Attr("sci", 5),
        Attr("icv_len", 16),
        Attr("window", 32),
        Attr("encoding_sa", 1),
        Attr("inc_sci", 1),
        Attr("es", 0),
        Attr("scb", 1),
        Attr("other", extra),
    ]


def test_macsec_icv_len_out_of_range():
    with pytest.raises(ValueError):
        LinkMacSec("macsec0", 10).icv_len(256)


def test_macvlan_invalid_mode():
    with pytest.raises(ValueError):
        LinkMacVlan("mvlan1", 2, 3)