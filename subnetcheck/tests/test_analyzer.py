import pytest

from subnetcheck.config import AnalyzerSettings
from subnetcheck.exceptions import EmptyInput, InvalidCIDR
from subnetcheck.models import Classification, InterfaceRecord, LinkStatus, PairingStatus
from subnetcheck.modules.analyzer import analyze, find_duplicate_addresses


def rec(node, interface, address, prefix_length, status=LinkStatus.UP):
    return InterfaceRecord(node, interface, status, address, prefix_length)


def test_shared_subnet_compatible():
    report = analyze([
        rec("nodeA", "backplane", "10.11.26.180", 24),
        rec("nodeB", "backplane", "10.11.26.181", 24),
    ])
    group = report.group("backplane")
    assert group.classification == Classification.COMPATIBLE
    assert [str(s.network) for s in group.subnets] == ["10.11.26.0/24"]
    assert group.node_count == 2
    assert report.passed


def test_same_name_p2p_pair():
    report = analyze([
        rec("nvme1", "100g1", "10.100.0.7", 31),
        rec("gw1", "100g1", "10.100.0.6", 31),
    ])
    group = report.group("100g1")
    assert group.classification == Classification.POINT_TO_POINT
    assert group.valid_pairs == 1
    assert group.invalid_pairs == 0
    assert group.pairings[0].cross_interface is False
    assert report.summary.p2p_groups == 1


def test_cross_interface_p2p_pair():
    report = analyze([
        rec("nvme1", "100g1", "10.100.0.7", 31),
        rec("gw1", "100g4", "10.100.0.6", 31),
    ])
    for name in ("100g1", "100g4"):
        group = report.group(name)
        assert group.classification == Classification.POINT_TO_POINT
        assert group.valid_pairs == 1
        pairing = group.pairings[0]
        assert pairing.cross_interface is True
        assert str(pairing.subnet) == "10.100.0.6/31"
        assert {(pairing.node_a, pairing.iface_a), (pairing.node_b, pairing.iface_b)} == {
            ("nvme1", "100g1"), ("gw1", "100g4"),
        }
    assert report.passed


def test_incompatible_shared_group():
    report = analyze([
        rec("nodeA", "mgmt", "10.11.1.5", 24),
        rec("nodeB", "mgmt", "10.12.1.5", 24),
    ])
    group = report.group("mgmt")
    assert group.classification == Classification.INCOMPATIBLE
    assert [(str(s.network), s.nodes) for s in group.subnets] == [
        ("10.11.1.0/24", ["nodeA"]),
        ("10.12.1.0/24", ["nodeB"]),
    ]
    assert not report.passed
    assert report.summary.failed_groups == 1


def test_unpaired_p2p_node():
    report = analyze([rec("nvme1", "100g1", "10.100.0.7", 31)])
    group = report.group("100g1")
    assert group.classification == Classification.INCOMPATIBLE
    assert len(group.pairings) == 1
    assert group.pairings[0].status == PairingStatus.UNPAIRED
    assert group.pairings[0].unpaired_node == "nvme1"
    assert group.invalid_pairs == 1
    assert not report.passed


def test_overpopulated_p2p_subnet():
    report = analyze([
        rec("n1", "100g1", "10.100.0.6", 31),
        rec("n2", "100g1", "10.100.0.7", 31),
        rec("n3", "100g2", "10.100.0.7", 31),
    ])
    group = report.group("100g1")
    assert group.classification == Classification.INCOMPATIBLE
    assert group.invalid_pairs == 1
    assert group.pairings[0].status == PairingStatus.OVERPOPULATED
    assert group.pairings[0].endpoint_count == 3
    assert report.group("100g2").classification == Classification.INCOMPATIBLE


def test_p2p_subnet_on_one_node_is_invalid():
    report = analyze([
        rec("n1", "100g1", "10.100.0.6", 31),
        rec("n1", "100g2", "10.100.0.7", 31),
    ])
    group = report.group("100g1")
    assert group.pairings[0].status == PairingStatus.SAME_NODE
    assert group.classification == Classification.INCOMPATIBLE


def test_p2p_subnet_with_one_address_on_both_ends_is_invalid():
    report = analyze([
        rec("n1", "100g1", "10.100.0.6", 31),
        rec("n2", "100g1", "10.100.0.6", 31),
    ])
    group = report.group("100g1")
    assert group.pairings[0].status == PairingStatus.DUPLICATE_ADDRESS
    assert group.valid_pairs == 0
    assert group.invalid_pairs == 1
    assert group.classification == Classification.INCOMPATIBLE
    assert not report.passed


def test_repeated_p2p_endpoint_still_pairs():
    report = analyze([
        rec("n1", "100g1", "10.100.0.6", 31),
        rec("n1", "100g1", "10.100.0.6", 31),
        rec("n2", "100g1", "10.100.0.7", 31),
    ])
    group = report.group("100g1")
    assert group.classification == Classification.POINT_TO_POINT
    assert group.valid_pairs == 1
    assert group.invalid_pairs == 0
    assert report.passed


def test_p2p_group_with_many_links():
    records = []
    for i in range(4):
        records.append(rec(f"nvme{i}", "100g1", f"10.100.0.{2 * i + 1}", 31))
        records.append(rec(f"gw{i}", "100g1", f"10.100.0.{2 * i}", 31))
    report = analyze(records)
    group = report.group("100g1")
    assert group.classification == Classification.POINT_TO_POINT
    assert group.valid_pairs == 4
    # Each link is evaluated once even though two records point at it
    assert len(group.pairings) == 4


def test_mixed_prefix_group_is_reported():
    report = analyze([
        rec("n1", "eth1", "10.100.0.6", 31),
        rec("n2", "eth1", "10.100.0.7", 31),
        rec("n3", "eth1", "10.20.0.3", 24),
    ])
    group = report.group("eth1")
    assert group.classification == Classification.MIXED_PREFIX
    assert not group.passed
    assert report.summary.failed_groups == 1


def test_down_records_are_excluded_but_listed():
    report = analyze([
        rec("nodeA", "backplane", "10.11.26.180", 24),
        rec("nodeB", "backplane", "10.99.0.1", 24, LinkStatus.DOWN),
    ])
    assert report.group("backplane").classification == Classification.COMPATIBLE
    assert [r.node for r in report.down] == ["nodeB"]


def test_empty_input_fails():
    with pytest.raises(EmptyInput) as exc:
        analyze([rec("nodeA", "backplane", "10.11.26.180", 24, LinkStatus.DOWN)])
    assert exc.value.report.passed is False
    assert "no data" in exc.value.report.reason


def test_no_records_at_all_fails():
    with pytest.raises(EmptyInput):
        analyze([])


def test_invalid_record_is_skipped():
    report = analyze([
        rec("nodeA", "backplane", "10.11.26.180", 24),
        rec("nodeB", "backplane", "10.11.26.300", 24),
        rec("nodeC", "backplane", "10.11.26.182", 40),
    ])
    assert report.group("backplane").node_count == 1
    assert [s.record.node for s in report.skipped] == ["nodeB", "nodeC"]
    assert report.passed


def test_invalid_record_aborts_in_strict_mode():
    settings = AnalyzerSettings(skip_invalid_records=False)
    with pytest.raises(InvalidCIDR):
        analyze([rec("nodeB", "backplane", "10.11.26.300", 24)], settings=settings)


def test_only_invalid_records_is_empty_input():
    with pytest.raises(EmptyInput) as exc:
        analyze([rec("nodeB", "backplane", "bogus", 24)])
    assert len(exc.value.report.skipped) == 1


def test_ignored_interfaces_are_dropped():
    report = analyze([
        rec("nodeA", "lo", "127.0.0.1", 8),
        rec("nodeB", "lo", "127.0.0.1", 8),
        rec("nodeA", "backplane", "10.11.26.180", 24),
    ])
    assert [g.interface_name for g in report.groups] == ["backplane"]
    assert report.duplicates == []


def test_duplicate_addresses_reported():
    records = [
        rec("nodeA", "backplane", "10.11.26.180", 24),
        rec("nodeB", "backplane", "10.11.26.180", 24),
    ]
    report = analyze(records)
    assert [d.address for d in report.duplicates] == ["10.11.26.180"]
    assert report.passed

    strict = AnalyzerSettings(fail_on_duplicate_addresses=True)
    assert not analyze(records, settings=strict).passed


def test_duplicate_detection_ignores_repeated_observation():
    records = [
        rec("nodeA", "backplane", "10.11.26.180", 24),
        rec("nodeA", "backplane", "10.11.26.180", 24),
    ]
    assert find_duplicate_addresses(records) == []


def test_duplicate_detection_compares_address_values():
    records = [
        rec("a", "eth0", "10.0.0.1", 24),
        rec("b", "eth0", 167772161, 24),
    ]
    duplicates = find_duplicate_addresses(records)
    assert [d.address for d in duplicates] == ["10.0.0.1"]
    assert [r.node for r in duplicates[0].holders] == ["a", "b"]


def test_group_order_is_input_order():
    report = analyze([
        rec("a", "mgmt", "10.1.0.1", 24),
        rec("a", "100g1", "10.100.0.0", 31),
        rec("b", "100g1", "10.100.0.1", 31),
        rec("b", "mgmt", "10.1.0.2", 24),
    ])
    assert [g.interface_name for g in report.groups] == ["mgmt", "100g1"]
    assert report.summary.to_dict() == {
        "total_groups": 2,
        "compatible_groups": 1,
        "p2p_groups": 1,
        "failed_groups": 0,
    }


def test_threaded_classification_matches_sequential():
    records = []
    for i in range(6):
        records.append(rec(f"n{i}", "mgmt", f"10.1.0.{i + 1}", 24))
        records.append(rec(f"n{i}", f"100g{i % 3}", f"10.100.{i // 2}.{i % 2}", 31))
    records.append(rec("n9", "100g7", "10.200.0.1", 31))

    sequential = analyze(records, workers=1).to_dict()
    threaded = analyze(records, workers=4).to_dict()
    assert threaded == sequential
