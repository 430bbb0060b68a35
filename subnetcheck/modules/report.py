"""Rendering and export of analysis reports."""
import json
import logging
from typing import List

from ..models import AnalysisReport, Classification, GroupResult, PairingStatus

logger = logging.getLogger("subnetcheck.report")

_LABELS = {
    Classification.COMPATIBLE: "✅ compatible",
    Classification.POINT_TO_POINT: "✅ point-to-point",
    Classification.INCOMPATIBLE: "❌ incompatible",
    Classification.MIXED_PREFIX: "❌ mixed /31 and shared prefixes",
}


def _render_pairing_lines(group: GroupResult) -> List[str]:
    lines = []
    for p in group.pairings:
        if p.status == PairingStatus.LINKED:
            note = "  (cross-interface)" if p.cross_interface else ""
            lines.append(f"    {p.subnet}: {p.node_a}.{p.iface_a} <-> {p.node_b}.{p.iface_b}{note}")
        elif p.status == PairingStatus.SAME_NODE:
            lines.append(f"    {p.subnet}: both ends on {p.node_a} ({p.iface_a}, {p.iface_b})")
        elif p.status == PairingStatus.DUPLICATE_ADDRESS:
            lines.append(f"    {p.subnet}: {p.node_a}.{p.iface_a} and {p.node_b}.{p.iface_b} share one address")
        elif p.status == PairingStatus.UNPAIRED:
            lines.append(f"    {p.subnet}: {p.unpaired_node}.{p.iface_a} unpaired, peer not found")
        else:
            lines.append(f"    {p.subnet}: {p.endpoint_count} endpoints share one /31")
    return lines


def render_group(group: GroupResult) -> List[str]:
    lines = [f"{group.interface_name}: {_LABELS[group.classification]}"]

    if group.classification == Classification.COMPATIBLE:
        subnet = group.subnets[0]
        lines.append(f"    {subnet.network}: {len(subnet.nodes)} node(s)")
    elif group.pairings:
        lines.append(f"    valid pairs: {group.valid_pairs}, invalid pairs: {group.invalid_pairs}")
        lines.extend(_render_pairing_lines(group))
    else:
        for subnet in group.subnets:
            lines.append(f"    {subnet.network}: {', '.join(subnet.nodes)}")
    return lines


def render_text(report: AnalysisReport) -> str:
    """Render a report as plain text; output is stable for identical input."""
    lines: List[str] = []
    for group in report.groups:
        lines.extend(render_group(group))

    if report.down:
        lines.append("")
        lines.append(f"DOWN interfaces ({len(report.down)}):")
        lines.extend(f"    {r.node}.{r.interface} {r.cidr}" for r in report.down)

    if report.skipped:
        lines.append("")
        lines.append(f"Skipped records ({len(report.skipped)}):")
        lines.extend(f"    {s.record.node}.{s.record.interface}: {s.reason}" for s in report.skipped)

    if report.duplicates:
        lines.append("")
        lines.append(f"Duplicate addresses ({len(report.duplicates)}):")
        for dup in report.duplicates:
            holders = ", ".join(f"{r.node}.{r.interface}" for r in dup.holders)
            lines.append(f"    {dup.address}: {holders}")

    summary = report.summary
    lines.append("")
    if report.reason:
        lines.append(f"Result: FAIL ({report.reason})")
    else:
        lines.append(
            f"Groups: {summary.total_groups} total, {summary.compatible_groups} shared, "
            f"{summary.p2p_groups} point-to-point, {summary.failed_groups} failed"
        )
        lines.append("Result: PASS" if report.passed else "Result: FAIL")
    return "\n".join(lines) + "\n"


def render_json(report: AnalysisReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def export_report(report: AnalysisReport, filename: str, fmt: str = "json") -> None:
    """Write a report to `filename` as json or text."""
    content = render_json(report) if fmt == "json" else render_text(report)
    with open(filename, "w") as f:
        f.write(content)
    logger.info(f"✅ Report exported to {filename}")
