import errno

import pytest

from rtnl.errors import (
    InvalidAddressError,
    InvalidHardwareAddressError,
    InvalidIpError,
    InvalidNlaError,
    NamespaceError,
    NetlinkError,
    RequestFailedError,
    RtnetlinkError,
    UnexpectedMessageError,
)
from rtnl.netlink import ErrorMessage, MessageType, NetlinkMessage


def test_request_failed_message():
    assert str(RequestFailedError()) == "A netlink request failed"


def test_namespace_error_message():
    err = NamespaceError("cannot mount")
    assert str(err) == "Namespace error cannot mount"
    assert err.detail == "cannot mount"


def test_invalid_ip_lists_bytes():
    err = InvalidIpError(b"\x01\x02")
    assert str(err) == "Failed to parse an IP address: [1, 2]"
    assert err.raw == b"\x01\x02"


def test_invalid_address_lists_both_parts():
    err = InvalidAddressError(b"\x0a", b"\xff")
    assert str(err) == (
        "Failed to parse a network address (IP and mask): [10]/[255]"
    )


def test_invalid_hardware_address_keeps_bytes():
    err = InvalidHardwareAddressError(b"\x02\x00")
    assert err.address == b"\x02\x00"
    assert str(err).endswith("[2, 0].")


def test_invalid_nla_message():
    assert str(InvalidNlaError("mtu")) == "Attempting to set and Invalid NLA: mtu"


def test_netlink_error_keeps_error_message():
    payload = ErrorMessage(code=-errno.EEXIST)
    err = NetlinkError(payload)
    assert err.error is payload
    assert str(err).startswith("Received a netlink error message ")


def test_unexpected_message_keeps_message():
    message = NetlinkMessage(MessageType.NEWADDR)
    err = UnexpectedMessageError(message)
    assert err.message is message
    assert str(err).startswith("Received an unexpected message ")


@pytest.mark.parametrize(
    "err, prefix",
    [
        (RequestFailedError(), "A netlink request failed"),
        (NamespaceError("x"), "Namespace error x"),
        (InvalidIpError(b""), "Failed to parse an IP address: []"),
        (InvalidNlaError("x"), "Attempting to set and Invalid NLA: x"),
        (NetlinkError(ErrorMessage(code=-1)), "Received a netlink error message "),
    ],
)
def test_all_errors_share_base(err, prefix):
    with pytest.raises(RtnetlinkError) as info:
        raise err
    assert info.value is err
    assert str(info.value).startswith(prefix)