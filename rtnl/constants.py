"""Legacy rtnetlink multicast group bit masks, for binding a listening socket."""

RTMGRP_LINK = 1
RTMGRP_NOTIFY = 2
RTMGRP_NEIGH = 4
RTMGRP_TC = 8
RTMGRP_IPV4_IFADDR = 16
RTMGRP_IPV4_MROUTE = 32
RTMGRP_IPV4_ROUTE = 64
RTMGRP_IPV4_RULE = 128
RTMGRP_IPV6_IFADDR = 256
RTMGRP_IPV6_MROUTE = 512
RTMGRP_IPV6_ROUTE = 1024
RTMGRP_IPV6_IFINFO = 2048
RTMGRP_DECNET_IFADDR = 4096
RTMGRP_DECNET_ROUTE = 16_384
RTMGRP_IPV6_PREFIX = 131_072