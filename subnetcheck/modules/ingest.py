"""Turn collected per-host output and record files into InterfaceRecords.

Two input shapes are accepted:

* Text from `ip -br -4 addr`, optionally prefixed with "host: " by pdsh or
  clush when gathered from many hosts at once::

      nvme1: 100g1            UP             10.100.0.7/31
      gw1: backplane          UP             10.11.26.181/24

* YAML or JSON files holding a list of records (or a mapping with a
  `records` key), validated against RECORD_SCHEMA.

Semantic checks on addresses and prefixes are left to the analyzer, which
skips bad records with a diagnostic instead of failing the whole run.
"""
import ipaddress
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from jsonschema import ValidationError, validate

from ..exceptions import IngestError
from ..models import InterfaceRecord, LinkStatus

logger = logging.getLogger("subnetcheck.ingest")

STRUCTURED_SUFFIXES = (".yaml", ".yml", ".json")

RECORD_SCHEMA = {
    "type": "object",
    "properties": {
        "node": {"type": "string", "minLength": 1},
        "interface": {"type": "string", "minLength": 1},
        "status": {"type": "string"},
        "address": {"type": ["string", "integer"]},
        "prefix_length": {"type": "integer"},
        "cidr": {"type": "string", "pattern": r"^[^/\s]+/[0-9]+$"},
    },
    "required": ["node", "interface"],
    "anyOf": [
        {"required": ["address", "prefix_length"]},
        {"required": ["cidr"]},
    ],
}

RECORDS_SCHEMA = {
    "type": "array",
    "items": RECORD_SCHEMA,
}

_IPV4_CIDR = re.compile(r"^[0-9.]+/[0-9]+$")
_IPV4_LITERAL = re.compile(r"^[0-9]{1,3}(\.[0-9]{1,3}){3}$")


def short_node_name(node: str) -> str:
    """Reduce an FQDN to its host label; IP literals are kept whole."""
    node = node.strip()
    if _IPV4_LITERAL.match(node):
        return node
    return node.split(".")[0]


def clean_interface_name(name: str) -> str:
    """Drop the `@parent` suffix `ip` prints for VLAN and veth interfaces."""
    return name.split("@", 1)[0]


def parse_host_line(line: str, node: Optional[str] = None) -> List[InterfaceRecord]:
    """Parse one line of `ip -br -4 addr` output into zero or more records."""
    line = line.strip()
    if not line or line.startswith("#"):
        return []

    tokens = line.split()
    if tokens[0].endswith(":"):
        node = tokens[0][:-1]
        tokens = tokens[1:]
    if node is None or len(tokens) < 3:
        return []

    interface = clean_interface_name(tokens[0])
    status = LinkStatus.from_text(tokens[1])
    node = short_node_name(node)

    records = []
    for token in tokens[2:]:
        if not _IPV4_CIDR.match(token):
            continue
        address, _, prefix = token.partition("/")
        records.append(InterfaceRecord(
            node=node,
            interface=interface,
            status=status,
            address=address,
            prefix_length=int(prefix),
        ))
    return records


def parse_host_output(text: str, node: Optional[str] = None) -> List[InterfaceRecord]:
    """Parse collected `ip -br -4 addr` output.

    Args:
        text: Raw output, one interface per line
        node: Node name for lines without a "host: " prefix

    Returns:
        Records in line order; lines without an IPv4 CIDR are ignored
    """
    records: List[InterfaceRecord] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        parsed = parse_host_line(line, node)
        if not parsed and line.strip():
            logger.debug("Ignoring line %d: %r", lineno, line)
        records.extend(parsed)
    return records


def record_from_dict(data: Dict[str, Any]) -> InterfaceRecord:
    """Build a record from one schema-validated mapping."""
    if "cidr" in data:
        address, _, prefix = data["cidr"].partition("/")
        prefix_length = int(prefix)
    else:
        address = data["address"]
        prefix_length = data["prefix_length"]

    return InterfaceRecord(
        node=short_node_name(data["node"]),
        interface=clean_interface_name(data["interface"]),
        status=LinkStatus.from_text(data.get("status", "UP")),
        address=address_text(address),
        prefix_length=prefix_length,
    )


def address_text(address: Union[str, int]) -> str:
    if isinstance(address, int) and 0 <= address <= 0xFFFFFFFF:
        return str(ipaddress.IPv4Address(address))
    return str(address).strip()


def records_from_data(data: Any, source: str = "<data>") -> List[InterfaceRecord]:
    """Validate a list (or {"records": [...]}) of record mappings."""
    if isinstance(data, dict) and "records" in data:
        data = data["records"]
    if data is None:
        data = []

    try:
        validate(instance=data, schema=RECORDS_SCHEMA)
    except ValidationError as ve:
        location = "/".join(str(p) for p in ve.absolute_path) or "<root>"
        raise IngestError(f"{source}: invalid record at {location}: {ve.message}") from ve

    return [record_from_dict(item) for item in data]


def load_records(path: Union[str, Path]) -> List[InterfaceRecord]:
    """Load a YAML or JSON record file."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise IngestError(f"Cannot read {path}: {e}") from e
    return records_from_data(data, source=str(path))


def load_path(path: Union[str, Path]) -> List[InterfaceRecord]:
    """Load records from a file or from every file in a directory.

    Structured files are recognised by suffix; everything else is read as
    host text output, with the file stem as the node for unprefixed lines.
    """
    path = Path(path)
    if path.is_dir():
        records: List[InterfaceRecord] = []
        for child in sorted(p for p in path.iterdir() if p.is_file()):
            records.extend(load_path(child))
        return records

    if path.suffix in STRUCTURED_SUFFIXES:
        records = load_records(path)
    else:
        try:
            text = path.read_text()
        except OSError as e:
            raise IngestError(f"Cannot read {path}: {e}") from e
        records = parse_host_output(text, node=path.stem)

    logger.info("📄 Loaded %d record(s) from %s", len(records), path)
    return records


def load_paths(paths: Iterable[Union[str, Path]]) -> List[InterfaceRecord]:
    records: List[InterfaceRecord] = []
    for path in paths:
        records.extend(load_path(path))
    return records
