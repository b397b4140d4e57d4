"""Exceptions raised by rtnetlink requests."""

from __future__ import annotations

from typing import Any


class RtnetlinkError(Exception):
    """Base class of every error raised by this package."""


class UnexpectedMessageError(RtnetlinkError):
    """The kernel answered with a message of an unexpected kind."""

    def __init__(self, message: Any) -> None:
        self.message = message
        super().__init__(f"Received an unexpected message {message!r}")


class NetlinkError(RtnetlinkError):
    """The kernel answered with a netlink error message."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(f"Received a netlink error message {error}")


class RequestFailedError(RtnetlinkError):
    """The request could not be handed to the connection."""

    def __init__(self) -> None:
        super().__init__("A netlink request failed")


class NamespaceError(RtnetlinkError):
    """A network namespace operation failed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Namespace error {detail}")


class InvalidHardwareAddressError(RtnetlinkError):
    """A link message carried a malformed hardware address."""

    def __init__(self, address: bytes) -> None:
        self.address = bytes(address)
        super().__init__(
            "Received a link message (RTM_GETLINK, RTM_NEWLINK, RTM_SETLINK "
            "or RTMGETLINK) with an invalid hardware address attribute: "
            f"{list(self.address)}."
        )


class InvalidIpError(RtnetlinkError):
    """Bytes that should hold an IP address could not be parsed."""

    def __init__(self, raw: bytes) -> None:
        self.raw = bytes(raw)
        super().__init__(f"Failed to parse an IP address: {list(self.raw)}")


class InvalidAddressError(RtnetlinkError):
    """An IP address and mask pair could not be parsed."""

    def __init__(self, ip: bytes, mask: bytes) -> None:
        self.ip = bytes(ip)
        self.mask = bytes(mask)
        super().__init__(
            "Failed to parse a network address (IP and mask): "
            f"{list(self.ip)}/{list(self.mask)}"
        )


class InvalidNlaError(RtnetlinkError):
    """An attribute could not be set."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Attempting to set and Invalid NLA: {detail}")