import json

import pytest
import yaml
from jsonschema import validate, ValidationError

from subnetcheck.exceptions import IngestError
from subnetcheck.models import LinkStatus
from subnetcheck.modules.ingest import (
    RECORD_SCHEMA,
    load_path,
    load_records,
    parse_host_output,
    records_from_data,
    short_node_name,
)

PDSH_OUTPUT = """\
nvme1.example.net: lo               UNKNOWN        127.0.0.1/8
nvme1.example.net: 100g1            UP             10.100.0.7/31
nvme1.example.net: backplane        UP             10.11.26.180/24 10.11.27.180/24
gw1: 100g4@bond0      UP             10.100.0.6/31
gw1: 25g1             DOWN
gw1: 25g2             LOWERLAYERDOWN 10.50.0.1/31
this line is noise
"""


def test_parse_pdsh_output():
    records = parse_host_output(PDSH_OUTPUT)
    assert [(r.node, r.interface, r.status, r.cidr) for r in records] == [
        ("nvme1", "lo", LinkStatus.DOWN, "127.0.0.1/8"),
        ("nvme1", "100g1", LinkStatus.UP, "10.100.0.7/31"),
        ("nvme1", "backplane", LinkStatus.UP, "10.11.26.180/24"),
        ("nvme1", "backplane", LinkStatus.UP, "10.11.27.180/24"),
        ("gw1", "100g4", LinkStatus.UP, "10.100.0.6/31"),
        ("gw1", "25g2", LinkStatus.DOWN, "10.50.0.1/31"),
    ]


def test_parse_unprefixed_output_needs_node():
    text = "eth0             UP             192.168.1.10/24 fe80::1/64\n"
    assert parse_host_output(text) == []
    records = parse_host_output(text, node="node7")
    assert [(r.node, r.cidr) for r in records] == [("node7", "192.168.1.10/24")]


def test_malformed_cidr_is_kept_for_analyzer():
    records = parse_host_output("n1: eth0 UP 10.0.0.300/24\n")
    assert records[0].address == "10.0.0.300"


def test_short_node_name():
    assert short_node_name("nvme1.example.net") == "nvme1"
    assert short_node_name("10.0.0.5") == "10.0.0.5"


def test_record_schema_accepts_cidr_or_address():
    validate(instance={"node": "a", "interface": "eth0", "cidr": "10.0.0.1/24"}, schema=RECORD_SCHEMA)
    validate(
        instance={"node": "a", "interface": "eth0", "address": "10.0.0.1", "prefix_length": 24},
        schema=RECORD_SCHEMA,
    )


def test_record_schema_rejects_missing_address():
    with pytest.raises(ValidationError):
        validate(instance={"node": "a", "interface": "eth0"}, schema=RECORD_SCHEMA)


def test_records_from_data():
    records = records_from_data({"records": [
        {"node": "gw1.lab", "interface": "100g4", "cidr": "10.100.0.6/31"},
        {"node": "nvme1", "interface": "100g1", "status": "down", "address": "10.100.0.7", "prefix_length": 31},
        {"node": "nvme2", "interface": "mgmt", "address": 167772161, "prefix_length": 8},
    ]})
    assert [(r.node, r.status, r.cidr) for r in records] == [
        ("gw1", LinkStatus.UP, "10.100.0.6/31"),
        ("nvme1", LinkStatus.DOWN, "10.100.0.7/31"),
        ("nvme2", LinkStatus.UP, "10.0.0.1/8"),
    ]


def test_records_from_data_reports_location():
    with pytest.raises(IngestError) as exc:
        records_from_data([{"node": "a", "interface": "eth0", "cidr": "10.0.0.1"}])
    assert "0" in str(exc.value)


def test_load_yaml_and_json(tmp_path):
    data = [{"node": "a", "interface": "eth0", "cidr": "10.0.0.1/24"}]
    yaml_file = tmp_path / "records.yaml"
    yaml_file.write_text(yaml.safe_dump(data))
    json_file = tmp_path / "records.json"
    json_file.write_text(json.dumps(data))

    assert load_records(yaml_file) == load_records(json_file)


def test_load_broken_json(tmp_path):
    bad = tmp_path / "records.json"
    bad.write_text("{not json")
    with pytest.raises(IngestError):
        load_records(bad)


def test_load_directory_uses_file_stem_as_node(tmp_path):
    (tmp_path / "gw1.txt").write_text("100g4 UP 10.100.0.6/31\n")
    (tmp_path / "nvme1.txt").write_text("100g1 UP 10.100.0.7/31\n")
    records = load_path(tmp_path)
    assert [(r.node, r.interface) for r in records] == [("gw1", "100g4"), ("nvme1", "100g1")]
