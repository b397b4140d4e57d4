"""Connection to an rtnetlink socket and the handle that issues requests."""

from __future__ import annotations

import asyncio
import dataclasses
from typing import AsyncIterator, Awaitable, Protocol

from .addr import AddressHandle
from .errors import RequestFailedError
from .link_requests import LinkHandle
from .neighbour import NeighbourHandle
from .netlink import ErrorMessage, MessageType, NetlinkFlags, NetlinkMessage


class NetlinkSocket(Protocol):
    """What a connection needs from a socket.

    ``send`` hands one message to the kernel; ``recv`` waits for the next
    message and returns None once the socket is closed.
    """

    def send(self, message: NetlinkMessage) -> None:
        ...

    def recv(self) -> Awaitable[NetlinkMessage | None]:
        ...


class Connection:
    """Matches replies to requests by sequence number.

    ``run`` must be running (for example as a task) for replies to arrive.
    Messages that answer no pending request, such as multicast
    notifications, go to ``messages``.
    """

    def __init__(self, socket: NetlinkSocket) -> None:
        self._socket = socket
        self._next_sequence = 1
        self._pending: dict[int, asyncio.Queue] = {}
        self._unsolicited: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def _take_sequence(self) -> int:
        sequence = self._next_sequence
        self._next_sequence = self._next_sequence % 0xFFFF_FFFF + 1
        return sequence

    def send(self, message: NetlinkMessage, track: bool) -> asyncio.Queue | None:
        """Send a message; return the queue its replies arrive on if tracked."""
        if self.closed:
            raise ConnectionError("connection closed")
        sequence = self._take_sequence()
        outgoing = dataclasses.replace(message, sequence_number=sequence)
        queue: asyncio.Queue | None = None
        if track:
            queue = asyncio.Queue()
            self._pending[sequence] = queue
        try:
            self._socket.send(outgoing)
        except OSError:
            self._pending.pop(sequence, None)
            raise
        return queue

    async def replies(
        self, sequence: int, queue: asyncio.Queue, wants_ack: bool
    ) -> AsyncIterator[NetlinkMessage]:
        """Yield the replies to one request until it is complete."""
        try:
            while True:
                reply = await queue.get()
                if reply is None or reply.message_type == MessageType.DONE:
                    return
                if isinstance(reply.payload, ErrorMessage):
                    if reply.payload.code != 0:
                        yield reply
                    return
                yield reply
                if not reply.flags & NetlinkFlags.MULTI and not wants_ack:
                    return
        finally:
            self._pending.pop(sequence, None)

    def _dispatch(self, message: NetlinkMessage) -> None:
        queue = (
            self._pending.get(message.sequence_number)
            if message.sequence_number
            else None
        )
        (queue if queue is not None else self._unsolicited).put_nowait(message)

    def _close(self) -> None:
        self.closed = True
        for queue in self._pending.values():
            queue.put_nowait(None)
        self._unsolicited.put_nowait(None)

    async def run(self) -> None:
        """Read from the socket until it closes, routing every message."""
        try:
            while True:
                message = await self._socket.recv()
                if message is None:
                    break
                self._dispatch(message)
        finally:
            self._close()

    async def messages(self) -> AsyncIterator[NetlinkMessage]:
        """Yield messages that answer no request, until the connection closes."""
        while True:
            message = await self._unsolicited.get()
            if message is None:
                return
            yield message


class Handle:
    """Issues requests over a connection; cheap to share."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def request(self, message: NetlinkMessage) -> AsyncIterator[NetlinkMessage]:
        """Send a request and return an iterator over its replies."""
        try:
            queue = self._connection.send(message, track=True)
        except (ConnectionError, OSError) as exc:
            raise RequestFailedError() from exc
        assert queue is not None
        sequence = next(
            seq for seq, pending in self._connection._pending.items()
            if pending is queue
        )
        wants_ack = bool(message.flags & NetlinkFlags.ACK)
        return self._connection.replies(sequence, queue, wants_ack)

    def notify(self, message: NetlinkMessage) -> None:
        """Send a message without waiting for any reply."""
        try:
            self._connection.send(message, track=False)
        except (ConnectionError, OSError) as exc:
            raise RequestFailedError() from exc

    def link(self) -> LinkHandle:
        """Link requests (``ip link``)."""
        return LinkHandle(self)

    def address(self) -> AddressHandle:
        """Address requests (``ip addr``)."""
        return AddressHandle(self)

    def neighbours(self) -> NeighbourHandle:
        """Neighbour requests (``ip neighbour``)."""
        return NeighbourHandle(self)


def from_socket(
    socket: NetlinkSocket,
) -> tuple[Connection, Handle, AsyncIterator[NetlinkMessage]]:
    """Wrap a socket: return its connection, a handle and unsolicited messages."""
    connection = Connection(socket)
    return connection, Handle(connection), connection.messages()