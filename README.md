# rtnl

`rtnl` describes rtnetlink requests for the Linux kernel as plain Python
objects and runs them over an asynchronous connection. It covers the ground of
`ip link`, `ip address` and `ip neighbour`: listing, creating, changing and
deleting links, addresses and neighbour entries.

Requests are put together with chained builder calls. They go out through a
`Handle`. Replies come back as async iterators. When the kernel answers with an
error, an exception is raised.

## Installation

```
pip install rtnl
```

Changing the kernel's networking state usually needs root privileges or
`CAP_NET_ADMIN`.

## Connecting

```python
import asyncio
from rtnl.handle import from_socket

async def main(socket):
    connection, handle, messages = from_socket(socket)
    asyncio.create_task(connection.run())
    ...
```

`from_socket` takes a socket object and returns three things:

- a `Connection`;
- a `Handle` for issuing requests;
- an async iterator over messages that answer no request, such as multicast
  notifications.

`Connection.run()` has to keep running for replies to arrive. It reads from the
socket until `recv()` returns `None`.

The socket must provide two methods, as described by `rtnl.handle.NetlinkSocket`:

- `send(message)` takes a `rtnl.netlink.NetlinkMessage`.
- `recv()` is awaitable. It returns the next `NetlinkMessage`, or `None` once
  the socket is closed.

The connection numbers every request it sends. It matches replies to requests
by that sequence number. Replies to one request end at a `DONE` message or at an
error or acknowledgement. A single reply without the `MULTI` flag also ends
them, unless the request asked for an acknowledgement.

The handle opens a helper for each kind of resource:

- `handle.link()` returns a `LinkHandle`.
- `handle.address()` returns an `AddressHandle`.
- `handle.neighbours()` returns a `NeighbourHandle`.

`handle.request(message)` sends a raw `NetlinkMessage` and returns its replies.
`handle.notify(message)` sends a message without waiting for any reply.

## Links

```python
from rtnl.link_builder import LinkDummy, LinkUnspec

async def make_dummy(handle):
    await handle.link().add(LinkDummy("dummy0").build()).execute()

async def find(handle, name):
    async for link in handle.link().get().match_name(name).execute():
        return link.header.index

async def set_down(handle, index):
    await handle.link().set(LinkUnspec.with_index(index).down().build()).execute()
```

`LinkHandle` offers these methods:

- `get`
- `add`, followed by `.replace()` or `.set_flags(...)` if needed
- `set`
- `delete`
- `property_add` and `property_del`, each with `.alt_ifname([...])`
- `set_port`

### Builders for each kind of link

Each kind of link has its own builder. Every builder is a subclass of
`rtnl.link_builder.LinkMessageBuilder`, so the generic setters work on all of
them:

- `up`, `down`, `promiscuous`, `arp`
- `name`, `mtu`, `index`, `address`
- `link`, `controller`, `nocontroller`
- `setns_by_pid`, `setns_by_fd`

| Kind | Builder | Module |
|------|---------|--------|
| bridge | `LinkBridge` | `rtnl.link_builder` |
| dummy | `LinkDummy` | `rtnl.link_builder` |
| wireguard | `LinkWireguard` | `rtnl.link_builder` |
| veth | `LinkVeth` | `rtnl.link_builder` |
| vrf | `LinkVrf` | `rtnl.link_builder` |
| macvlan | `LinkMacVlan` | `rtnl.link_kinds` |
| macvtap | `LinkMacVtap` | `rtnl.link_kinds` |
| xfrm | `LinkXfrm` | `rtnl.link_kinds` |
| vlan | `LinkVlan` | `rtnl.link_kinds` |
| macsec | `LinkMacSec` | `rtnl.link_kinds` |
| vxlan | `LinkVxlan` | `rtnl.link_vxlan` |
| bond | `LinkBond` | `rtnl.link_bond` |

Settings for a bond port are built with `LinkBondPort` and applied with
`handle.link().set_port(...)`. Integer settings are checked against the width
of their field. A value out of range raises `ValueError`.

```python
from rtnl.link_bond import BondMode, LinkBond

message = (
    LinkBond("bond0")
    .mode(BondMode.ACTIVE_BACKUP)
    .miimon(100)
    .min_links(2)
    .up()
    .build()
)
```

## Addresses

```python
from ipaddress import ip_address

async def add_address(handle, index):
    await handle.address().add(index, ip_address("192.0.2.10"), 24).execute()

async def flush(handle, index):
    async for message in handle.address().get().set_link_index_filter(index).execute():
        await handle.address().delete(message).execute()
```

`AddressMessageBuilder` builds an address message directly. Pass
`AddressFamily.INET6` to it for IPv6. For an IPv4 address that is not
multicast, it adds the address, local and broadcast attributes. Address
listings can be filtered by interface index, prefix length or address. The
filtering happens on the receiving side.

## Neighbours

```python
from ipaddress import ip_address
from rtnl.neighbour import IpVersion

async def add_neighbour(handle, index):
    await (
        handle.neighbours()
        .add(index, ip_address("192.0.2.1"))
        .link_local_address(bytes.fromhex("020000000001"))
        .execute()
    )

async def dump(handle):
    async for entry in handle.neighbours().get().set_family(IpVersion.V4).execute():
        print(entry)
```

`handle.neighbours().add_bridge(index, lla)` adds a bridge forwarding database
entry.

## Errors

Every failure raises a subclass of `rtnl.errors.RtnetlinkError`:

- `NetlinkError` is raised when the kernel replies with an error message. The
  `ErrorMessage` is kept on its `error` attribute.
- `UnexpectedMessageError` is raised when a reply has an unexpected type.
- `RequestFailedError` is raised when a request could not be sent, for example
  because the connection is closed.

The multicast group masks used to listen for events are in `rtnl.constants`.

## What this package does not do

- It does not open netlink sockets.
- It does not encode messages into the kernel's binary wire format, and it does
  not decode them from it.

Messages and attributes are Python objects: `NetlinkMessage`, `LinkMessage`,
`AddressMessage`, `NeighbourMessage` and `Attr`. The socket passed to
`from_socket` has to do the conversion to and from bytes.

There are no requests for routes, routing rules, traffic control or network
namespaces. There is no command-line program.