import errno

import pytest

from rtnl.errors import NetlinkError, UnexpectedMessageError
from rtnl.netlink import (
    Attr,
    ErrorMessage,
    LinkMessage,
    MessageType,
    NeighbourMessage,
    NeighbourState,
    NetlinkMessage,
    check_error,
    expect_payload,
    find_attr,
)


def test_expect_payload_returns_inner_message():
    link = LinkMessage()
    reply = NetlinkMessage(MessageType.NEWLINK, link)
    assert expect_payload(reply, MessageType.NEWLINK) is link


def test_expect_payload_raises_on_error():
    error = ErrorMessage(code=-errno.ENODEV)
    reply = NetlinkMessage(MessageType.ERROR, error)
    with pytest.raises(NetlinkError) as info:
        expect_payload(reply, MessageType.NEWLINK)
    assert info.value.error == error


def test_expect_payload_raises_on_other_type():
    reply = NetlinkMessage(MessageType.NEWADDR, LinkMessage())
    with pytest.raises(UnexpectedMessageError) as info:
        expect_payload(reply, MessageType.NEWLINK)
    assert info.value.message is reply


def test_expect_payload_treats_ack_as_unexpected():
    reply = NetlinkMessage(MessageType.ERROR, ErrorMessage(code=0))
    with pytest.raises(UnexpectedMessageError):
        expect_payload(reply, MessageType.NEWLINK)


def test_check_error_lets_ack_through():
    ack = NetlinkMessage(MessageType.ERROR, ErrorMessage(code=0))
    check_error(ack)
    assert ack.is_error() is False


def test_check_error_raises_on_error():
    reply = NetlinkMessage(MessageType.ERROR, ErrorMessage(code=-errno.EPERM))
    assert reply.is_error() is True
    with pytest.raises(NetlinkError):
        check_error(reply)


def test_error_message_errno_and_text():
    error = ErrorMessage(code=-errno.EEXIST)
    assert error.errno == errno.EEXIST
    assert f"(os error {errno.EEXIST})" in str(error)
    assert error.to_os_error().errno == errno.EEXIST


def test_find_attr_returns_first_match():
    attrs = [Attr("mtu", 1), Attr("ifname", "a"), Attr("ifname", "b")]
    assert find_attr(attrs, "ifname") == Attr("ifname", "a")
    assert find_attr(attrs, "link") is None


def test_default_messages_do_not_share_attributes():
    first, second = LinkMessage(), LinkMessage()
    first.attributes.append(Attr("ifname", "x"))
    first.header.index = 3
    assert second.attributes == []
    assert second.header.index == 0


def test_neighbour_message_defaults():
    message = NeighbourMessage()
    assert message.header.state == NeighbourState.NONE
    assert message.attributes == []