"""Classification of interface groups."""
import logging
from typing import Dict, List

from ..models import (
    Classification,
    GroupResult,
    InterfaceRecord,
    NetworkAddress,
    SubnetMembers,
)
from .addressing import P2P_PREFIX_LENGTH
from .grouping import distinct_subnets
from .pairing import pair_group

logger = logging.getLogger("subnetcheck.classifier")


def _subnet_members(subnets: Dict[NetworkAddress, List[InterfaceRecord]]) -> List[SubnetMembers]:
    return [
        SubnetMembers(network=network, nodes=[r.node for r in members])
        for network, members in subnets.items()
    ]


def classify_group(
    interface_name: str,
    records: List[InterfaceRecord],
    buckets: Dict[NetworkAddress, List[InterfaceRecord]],
) -> GroupResult:
    """Classify all UP records sharing one interface name.

    Args:
        interface_name: The shared interface name
        records: The group's records, in input order
        buckets: Global /31 buckets from `build_p2p_buckets`

    Returns:
        GroupResult with classification, subnets and, for /31 groups,
        per-link pairing details
    """
    subnets = distinct_subnets(records)
    members = _subnet_members(subnets)
    p2p_count = sum(1 for r in records if int(r.prefix_length) == P2P_PREFIX_LENGTH)
    result = GroupResult(
        interface_name=interface_name,
        classification=Classification.INCOMPATIBLE,
        subnets=members,
        record_count=len(records),
    )

    if records and p2p_count == len(records):
        result.pairings = pair_group(records, buckets)
        if result.invalid_pairs == 0:
            result.classification = Classification.POINT_TO_POINT
            logger.info(
                "✅ %s: point-to-point, %d link(s), %d cross-interface",
                interface_name, result.valid_pairs, result.cross_interface_pairs,
            )
        else:
            logger.error(
                "❌ %s: %d of %d point-to-point subnet(s) invalid",
                interface_name, result.invalid_pairs, len(result.pairings),
            )
        return result

    if len(subnets) == 1:
        result.classification = Classification.COMPATIBLE
        logger.info("✅ %s: %d node(s) share %s", interface_name, len(records), members[0].network)
        return result

    if p2p_count:
        result.classification = Classification.MIXED_PREFIX
        logger.error(
            "❌ %s: mixes /31 and wider prefixes (%d of %d records are /31)",
            interface_name, p2p_count, len(records),
        )
        return result

    logger.error("❌ %s: %d different subnets", interface_name, len(subnets))
    for subnet in members:
        logger.error("   %s: %s", subnet.network, ", ".join(subnet.nodes))
    return result
