"""Partitioning of interface records by interface name and by /31 subnet."""
from typing import Dict, Iterable, List

from ..models import InterfaceRecord, NetworkAddress
from .addressing import P2P_PREFIX_LENGTH, parse_ipv4, record_network


def group_by_interface(records: Iterable[InterfaceRecord]) -> Dict[str, List[InterfaceRecord]]:
    """Group UP records by interface name.

    Groups appear in the order their interface name was first seen and
    records keep their input order inside each group.
    """
    groups: Dict[str, List[InterfaceRecord]] = {}
    for record in records:
        if not record.is_up:
            continue
        groups.setdefault(record.interface, []).append(record)
    return groups


def _same_endpoint(a: InterfaceRecord, b: InterfaceRecord) -> bool:
    return (a.node, a.interface, parse_ipv4(a.address)) == (b.node, b.interface, parse_ipv4(b.address))


def build_p2p_buckets(records: Iterable[InterfaceRecord]) -> Dict[NetworkAddress, List[InterfaceRecord]]:
    """Bucket every UP /31 record by its network address.

    Buckets span all interface names, so node A's "100g4" and node B's
    "100g1" land together whenever their /31 networks match.
    """
    buckets: Dict[NetworkAddress, List[InterfaceRecord]] = {}
    for record in records:
        if not record.is_up or int(record.prefix_length) != P2P_PREFIX_LENGTH:
            continue
        bucket = buckets.setdefault(record_network(record), [])
        # The same endpoint observed twice is still one end of the link
        if any(_same_endpoint(r, record) for r in bucket):
            continue
        bucket.append(record)
    return buckets


def distinct_subnets(records: Iterable[InterfaceRecord]) -> Dict[NetworkAddress, List[InterfaceRecord]]:
    """Map each distinct network in `records` to its members, in first-seen order."""
    subnets: Dict[NetworkAddress, List[InterfaceRecord]] = {}
    for record in records:
        subnets.setdefault(record_network(record), []).append(record)
    return subnets
