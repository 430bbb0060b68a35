"""Cluster-wide subnet compatibility analysis.

Pipeline for one run:
1. Drop ignored interface names, split DOWN records off as informational
2. Validate every UP record's address/prefix, skipping bad ones
3. Group by interface name and build the global /31 bucket map
4. Classify every group (optionally on a thread pool)
5. Aggregate group results into an AnalysisReport
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import AnalyzerSettings, get_settings
from ..exceptions import EmptyInput, InvalidCIDR
from ..models import (
    AnalysisReport,
    DuplicateAddress,
    GroupResult,
    InterfaceRecord,
    NetworkAddress,
    SkippedRecord,
)
from .addressing import format_ipv4, parse_ipv4, record_network
from .classifier import classify_group
from .grouping import build_p2p_buckets, group_by_interface

logger = logging.getLogger("subnetcheck.analyzer")


def _screen_records(
    records: Iterable[InterfaceRecord],
    settings: AnalyzerSettings,
    report: AnalysisReport,
) -> List[InterfaceRecord]:
    """Return the UP records that can be analyzed, noting the rest on `report`."""
    ignored = set(settings.ignore_interfaces)
    usable: List[InterfaceRecord] = []

    for record in records:
        if record.interface in ignored:
            continue

        if not record.is_up:
            report.down.append(record)
            if settings.warn_down_interfaces:
                logger.warning("⚠️  %s.%s is DOWN (%s)", record.node, record.interface, record.cidr)
            continue

        try:
            record_network(record)
        except InvalidCIDR as e:
            if not settings.skip_invalid_records:
                raise
            logger.warning("⚠️  Skipping %s.%s: %s", record.node, record.interface, e)
            report.skipped.append(SkippedRecord(record=record, reason=str(e)))
            continue

        usable.append(record)

    return usable


def find_duplicate_addresses(records: Iterable[InterfaceRecord]) -> List[DuplicateAddress]:
    """Find addresses held by more than one (node, interface) endpoint."""
    holders: Dict[int, List[InterfaceRecord]] = {}
    for record in records:
        # Keyed on the parsed value; "10.0.0.1" and 167772161 are one address
        entries = holders.setdefault(parse_ipv4(record.address), [])
        if any(r.node == record.node and r.interface == record.interface for r in entries):
            continue
        entries.append(record)

    duplicates = [
        DuplicateAddress(address=format_ipv4(address), holders=entries)
        for address, entries in holders.items()
        if len(entries) > 1
    ]
    for dup in duplicates:
        logger.warning(
            "⚠️  Duplicate address %s on %s",
            dup.address, ", ".join(f"{r.node}.{r.interface}" for r in dup.holders),
        )
    return duplicates


def _classify_all(
    groups: Dict[str, List[InterfaceRecord]],
    buckets: Dict[NetworkAddress, List[InterfaceRecord]],
    workers: int,
) -> List[GroupResult]:
    # Buckets are complete before any group is classified; pairing looks across groups
    items: List[Tuple[str, List[InterfaceRecord]]] = list(groups.items())
    if workers <= 1 or len(items) <= 1:
        return [classify_group(name, members, buckets) for name, members in items]

    with ThreadPoolExecutor(max_workers=min(workers, len(items)),
                            thread_name_prefix="subnetcheck") as executor:
        futures = [executor.submit(classify_group, name, members, buckets) for name, members in items]
        return [future.result() for future in futures]


def analyze(
    records: Iterable[InterfaceRecord],
    settings: Optional[AnalyzerSettings] = None,
    workers: Optional[int] = None,
) -> AnalysisReport:
    """Analyze subnet compatibility across a cluster.

    Args:
        records: Interface records from every node, in collection order
        settings: Analyzer settings (default: global settings)
        workers: Override for `settings.workers`

    Returns:
        AnalysisReport with per-group results and the overall verdict

    Raises:
        EmptyInput: If no usable UP record remains; the failed report is attached
        InvalidCIDR: If a record is invalid and `skip_invalid_records` is off
    """
    settings = settings or get_settings()
    workers = workers if workers is not None else settings.workers
    report = AnalysisReport(fail_on_duplicates=settings.fail_on_duplicate_addresses)
    start_time = time.time()

    usable = _screen_records(records, settings, report)
    if not usable:
        report.reason = "no data: no UP interface records to analyze"
        if report.skipped:
            report.reason += f" ({len(report.skipped)} invalid record(s) skipped)"
        logger.error("❌ %s", report.reason)
        raise EmptyInput(report.reason, report=report)

    groups = group_by_interface(usable)
    buckets = build_p2p_buckets(usable)
    logger.info(
        "🔍 Analyzing %d record(s) in %d interface group(s), %d /31 subnet(s)",
        len(usable), len(groups), len(buckets),
    )

    for result in _classify_all(groups, buckets, workers):
        report.add(result)

    report.duplicates = find_duplicate_addresses(usable)

    summary = report.summary
    if report.passed:
        logger.info(
            "✅ All %d interface group(s) compatible (%d shared, %d point-to-point)",
            summary.total_groups, summary.compatible_groups, summary.p2p_groups,
        )
    elif summary.failed_groups:
        logger.error(
            "❌ %d of %d interface group(s) failed",
            summary.failed_groups, summary.total_groups,
        )
    else:
        logger.error("❌ %d duplicate address(es) found", len(report.duplicates))
    logger.debug("Analysis finished in %.3fs", time.time() - start_time)
    return report
