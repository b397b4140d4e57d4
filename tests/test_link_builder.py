from rtnl.link_builder import (
    LinkBondPort,
    LinkBridge,
    LinkDummy,
    LinkMessageBuilder,
    LinkUnspec,
    LinkVeth,
    LinkVrf,
    LinkWireguard,
)
from rtnl.netlink import (
    AddressFamily,
    Attr,
    InfoKind,
    InfoPortKind,
    LinkFlags,
    LinkHeader,
    find_attr,
)


def test_empty_builder_has_no_attributes():
    message = LinkMessageBuilder().build()
    assert message.attributes == []
    assert message.header == LinkHeader()


def test_wireguard_link_info():
    message = LinkWireguard("wg142").build()
    assert Attr("ifname", "wg142") in message.attributes
    assert Attr("link_info", [Attr("kind", InfoKind.WIREGUARD)]) in message.attributes


def test_vrf_link_info():
    message = LinkVrf("vrf2222", 2222).build()
    assert Attr("ifname", "vrf2222") in message.attributes
    assert (
        Attr(
            "link_info",
            [Attr("kind", InfoKind.VRF), Attr("data", [Attr("table_id", 2222)])],
        )
        in message.attributes
    )


def test_bridge_is_up():
    message = LinkBridge("my-bridge").build()
    assert message.attributes == [
        Attr("ifname", "my-bridge"),
        Attr("link_info", [Attr("kind", InfoKind.BRIDGE)]),
    ]
    assert message.header.flags & LinkFlags.UP
    assert message.header.change_mask & LinkFlags.UP


def test_dummy_is_not_up():
    message = LinkDummy("dummy0").build()
    assert message.attributes == [
        Attr("ifname", "dummy0"),
        Attr("link_info", [Attr("kind", InfoKind.DUMMY)]),
    ]
    assert not message.header.flags & LinkFlags.UP


def test_veth_peer_message():
    message = LinkVeth("veth1", "veth1-peer").build()
    info = find_attr(message.attributes, "link_info").value
    assert info[0] == Attr("kind", InfoKind.VETH)
    peer = info[1].value[0]
    assert peer.kind == "peer"
    assert peer.value.attributes == [Attr("ifname", "veth1-peer")]


def test_veth_peer_replaces_previous():
    builder = LinkVeth("veth1", "first").peer("second")
    data = builder.build().attributes[-1].value[1].value
    assert len(data) == 1
    assert data[0].value.attributes == [Attr("ifname", "second")]


def test_bond_port_settings():
    message = LinkBondPort(7).queue_id(1).prio(2).build()
    assert message.header.index == 7
    assert message.attributes == [
        Attr(
            "link_info",
            [
                Attr("port_kind", InfoPortKind.BOND),
                Attr("port_data", [Attr("queue_id", 1), Attr("prio", 2)]),
            ],
        )
    ]


def test_unspec_with_name_controller_down():
    message = LinkUnspec.with_name("my-dummy0").controller(63).down().build()
    assert message.attributes == [
        Attr("ifname", "my-dummy0"),
        Attr("controller", 63),
    ]
    assert not message.header.flags & LinkFlags.UP
    assert message.header.change_mask == LinkFlags.UP


def test_unspec_with_index():
    message = LinkUnspec.with_index(12).build()
    assert message.header.index == 12
    assert message.attributes == []


def test_up_then_down_clears_flag():
    message = LinkUnspec().up().down().build()
    assert message.header.flags == LinkFlags(0)
    assert message.header.change_mask == LinkFlags.UP


def test_promiscuous_toggle():
    on = LinkUnspec().promiscuous(True).build()
    assert on.header.flags & LinkFlags.PROMISC
    off = LinkUnspec().promiscuous(True).promiscuous(False).build()
    assert not off.header.flags & LinkFlags.PROMISC
    assert off.header.change_mask == LinkFlags.PROMISC


def test_arp_toggle():
    disabled = LinkUnspec().arp(False).build()
    assert disabled.header.flags & LinkFlags.NOARP
    enabled = LinkUnspec().arp(False).arp(True).build()
    assert not enabled.header.flags & LinkFlags.NOARP
    assert enabled.header.change_mask == LinkFlags.NOARP


def test_extra_attributes_keep_order():
    message = (
        LinkUnspec()
        .mtu(1400)
        .address(b"\x02\x00\x00\x00\x00\x01")
        .setns_by_pid(42)
        .setns_by_fd(5)
        .link(3)
        .nocontroller()
        .build()
    )
    assert message.attributes == [
        Attr("mtu", 1400),
        Attr("address", b"\x02\x00\x00\x00\x00\x01"),
        Attr("net_ns_pid", 42),
        Attr("net_ns_fd", 5),
        Attr("link", 3),
        Attr("controller", 0),
    ]


def test_set_header():
    header = LinkHeader(interface_family=AddressFamily.BRIDGE, index=9)
    message = LinkUnspec().set_header(header).build()
    assert message.header.interface_family == AddressFamily.BRIDGE
    assert message.header.index == 9


def test_set_info_data_replaces():
    builder = LinkVrf("vrf1", 10).set_info_data([Attr("table_id", 20)])
    info = find_attr(builder.build().attributes, "link_info").value
    assert info[1] == Attr("data", [Attr("table_id", 20)])


def test_append_info_data_on_generic_builder():
    builder = LinkMessageBuilder(InfoKind.DUMMY)
    builder.append_info_data(Attr("x", 1)).append_info_data(Attr("y", 2))
    info = builder.build().attributes[0].value
    assert info == [
        Attr("kind", InfoKind.DUMMY),
        Attr("data", [Attr("x", 1), Attr("y", 2)]),
    ]


def test_set_port_data():
    message = (
        LinkUnspec()
        .set_port_kind(InfoPortKind.BRIDGE)
        .set_port_data([Attr("prio", 3)])
        .build()
    )
    assert message.attributes == [
        Attr(
            "link_info",
            [
                Attr("port_kind", InfoPortKind.BRIDGE),
                Attr("port_data", [Attr("prio", 3)]),
            ],
        )
    ]


def test_build_does_not_share_header():
    builder = LinkUnspec.with_index(4)
    message = builder.build()
    builder.index(5)
    assert message.header.index == 4