"""Point-to-point (/31) link pairing."""
import logging
from typing import Dict, Iterable, List

from ..models import InterfaceRecord, NetworkAddress, PairingDetail, PairingStatus
from .addressing import parse_ipv4, record_network

logger = logging.getLogger("subnetcheck.pairing")


def evaluate_subnet(subnet: NetworkAddress, bucket: List[InterfaceRecord]) -> PairingDetail:
    """Judge one /31 network from the records sharing it across the cluster.

    A link is valid only with exactly two endpoints on two distinct nodes.
    Differently named interfaces at each end are allowed and flagged as a
    cross-interface link.
    """
    count = len(bucket)

    if count == 1:
        lone = bucket[0]
        logger.error("❌ %s: %s.%s has no peer", subnet, lone.node, lone.interface)
        return PairingDetail(
            subnet=subnet,
            status=PairingStatus.UNPAIRED,
            iface_a=lone.interface,
            unpaired_node=lone.node,
            endpoint_count=1,
        )

    if count != 2:
        endpoints = ", ".join(f"{r.node}.{r.interface}" for r in bucket)
        logger.error("❌ %s: %d endpoints share the /31 (%s)", subnet, count, endpoints)
        return PairingDetail(subnet=subnet, status=PairingStatus.OVERPOPULATED, endpoint_count=count)

    a, b = bucket
    cross = a.interface != b.interface
    if a.node == b.node:
        logger.error("❌ %s: both ends are on %s (%s, %s)", subnet, a.node, a.interface, b.interface)
        status = PairingStatus.SAME_NODE
    elif parse_ipv4(a.address) == parse_ipv4(b.address):
        logger.error(
            "❌ %s: %s.%s and %s.%s both use %s",
            subnet, a.node, a.interface, b.node, b.interface, a.address,
        )
        status = PairingStatus.DUPLICATE_ADDRESS
    else:
        status = PairingStatus.LINKED
        if cross:
            logger.warning(
                "⚠️  %s: cross-interface link %s.%s <-> %s.%s",
                subnet, a.node, a.interface, b.node, b.interface,
            )
        else:
            logger.debug("%s: %s <-> %s on %s", subnet, a.node, b.node, a.interface)

    return PairingDetail(
        subnet=subnet,
        status=status,
        node_a=a.node,
        iface_a=a.interface,
        node_b=b.node,
        iface_b=b.interface,
        cross_interface=cross,
        endpoint_count=2,
    )


def pair_group(
    records: Iterable[InterfaceRecord],
    buckets: Dict[NetworkAddress, List[InterfaceRecord]],
) -> List[PairingDetail]:
    """Evaluate every distinct /31 network in a group once, in first-seen order."""
    details: List[PairingDetail] = []
    seen = set()
    for record in records:
        subnet = record_network(record)
        if subnet in seen:
            continue
        seen.add(subnet)
        # Buckets hold every UP /31 record, so the group's own record is always present
        details.append(evaluate_subnet(subnet, buckets.get(subnet, [record])))
    return details
