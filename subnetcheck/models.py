"""Data models for subnet compatibility analysis."""

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LinkStatus(str, Enum):
    """Operational state of an interface."""
    UP = 'UP'
    DOWN = 'DOWN'

    @classmethod
    def from_text(cls, value: str) -> 'LinkStatus':
        """Map an `ip` state column (UP, DOWN, UNKNOWN, ...) onto UP/DOWN."""
        return cls.UP if str(value).strip().upper() == 'UP' else cls.DOWN


class Classification(str, Enum):
    """Outcome of classifying one interface group."""
    COMPATIBLE = 'compatible'
    POINT_TO_POINT = 'point_to_point'
    INCOMPATIBLE = 'incompatible'
    MIXED_PREFIX = 'mixed_prefix'

    @property
    def passed(self) -> bool:
        return self in (Classification.COMPATIBLE, Classification.POINT_TO_POINT)


class PairingStatus(str, Enum):
    """Outcome of evaluating one /31 subnet."""
    LINKED = 'linked'
    UNPAIRED = 'unpaired'
    OVERPOPULATED = 'overpopulated'
    SAME_NODE = 'same_node'
    DUPLICATE_ADDRESS = 'duplicate_address'


@dataclass(frozen=True)
class InterfaceRecord:
    """One observation of one interface on one node."""
    node: str
    interface: str
    status: LinkStatus
    address: str
    prefix_length: int

    @property
    def cidr(self) -> str:
        return f"{self.address}/{self.prefix_length}"

    @property
    def is_up(self) -> bool:
        return self.status == LinkStatus.UP

    def to_dict(self) -> Dict[str, Any]:
        return {
            'node': self.node,
            'interface': self.interface,
            'status': self.status.value,
            'address': self.address,
            'prefix_length': self.prefix_length,
        }


@dataclass(frozen=True, order=True)
class NetworkAddress:
    """A masked IPv4 network together with its prefix length."""
    value: int
    prefix_length: int

    def __str__(self) -> str:
        return f"{ipaddress.IPv4Address(self.value)}/{self.prefix_length}"


@dataclass
class SubnetMembers:
    """A distinct subnet inside an interface group and the nodes on it."""
    network: NetworkAddress
    nodes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'network': str(self.network), 'nodes': list(self.nodes)}


@dataclass
class PairingDetail:
    """Diagnostic for one /31 subnet evaluated by the pairing algorithm."""
    subnet: NetworkAddress
    status: PairingStatus
    node_a: Optional[str] = None
    iface_a: Optional[str] = None
    node_b: Optional[str] = None
    iface_b: Optional[str] = None
    cross_interface: bool = False
    unpaired_node: Optional[str] = None
    endpoint_count: int = 0

    @property
    def valid(self) -> bool:
        return self.status == PairingStatus.LINKED

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'subnet': str(self.subnet),
            'status': self.status.value,
            'endpoint_count': self.endpoint_count,
        }
        if self.status in (PairingStatus.LINKED, PairingStatus.SAME_NODE,
                           PairingStatus.DUPLICATE_ADDRESS):
            data.update({
                'node_a': self.node_a,
                'iface_a': self.iface_a,
                'node_b': self.node_b,
                'iface_b': self.iface_b,
                'cross_interface': self.cross_interface,
            })
        elif self.status == PairingStatus.UNPAIRED:
            data['unpaired_node'] = self.unpaired_node
            data['iface_a'] = self.iface_a
        return data


@dataclass
class GroupResult:
    """Classification of all records sharing one interface name."""
    interface_name: str
    classification: Classification
    subnets: List[SubnetMembers] = field(default_factory=list)
    pairings: List[PairingDetail] = field(default_factory=list)
    record_count: int = 0

    @property
    def passed(self) -> bool:
        return self.classification.passed

    @property
    def node_count(self) -> int:
        return sum(len(s.nodes) for s in self.subnets)

    @property
    def valid_pairs(self) -> int:
        return sum(1 for p in self.pairings if p.valid)

    @property
    def invalid_pairs(self) -> int:
        return sum(1 for p in self.pairings if not p.valid)

    @property
    def cross_interface_pairs(self) -> int:
        return sum(1 for p in self.pairings if p.valid and p.cross_interface)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'interface_name': self.interface_name,
            'classification': self.classification.value,
            'passed': self.passed,
            'record_count': self.record_count,
            'subnets': [s.to_dict() for s in self.subnets],
            'pairings': [p.to_dict() for p in self.pairings],
            'valid_pairs': self.valid_pairs,
            'invalid_pairs': self.invalid_pairs,
        }


@dataclass
class SkippedRecord:
    """A record dropped before analysis and the reason it was dropped."""
    record: InterfaceRecord
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {'record': self.record.to_dict(), 'reason': self.reason}


@dataclass
class DuplicateAddress:
    """An IPv4 address configured on more than one endpoint."""
    address: str
    holders: List[InterfaceRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'address': self.address,
            'holders': [f"{r.node}.{r.interface}" for r in self.holders],
        }


@dataclass
class Summary:
    """Aggregate counts across all interface groups."""
    total_groups: int = 0
    compatible_groups: int = 0
    p2p_groups: int = 0
    failed_groups: int = 0

    def record(self, result: GroupResult) -> None:
        self.total_groups += 1
        if result.classification == Classification.COMPATIBLE:
            self.compatible_groups += 1
        elif result.classification == Classification.POINT_TO_POINT:
            self.p2p_groups += 1
        else:
            self.failed_groups += 1

    def to_dict(self) -> Dict[str, int]:
        return {
            'total_groups': self.total_groups,
            'compatible_groups': self.compatible_groups,
            'p2p_groups': self.p2p_groups,
            'failed_groups': self.failed_groups,
        }


@dataclass
class AnalysisReport:
    """Result of one analysis run."""
    groups: List[GroupResult] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    skipped: List[SkippedRecord] = field(default_factory=list)
    down: List[InterfaceRecord] = field(default_factory=list)
    duplicates: List[DuplicateAddress] = field(default_factory=list)
    reason: Optional[str] = None
    fail_on_duplicates: bool = False

    @property
    def passed(self) -> bool:
        if self.reason is not None:
            return False
        if self.fail_on_duplicates and self.duplicates:
            return False
        return self.summary.failed_groups == 0

    def add(self, result: GroupResult) -> None:
        self.groups.append(result)
        self.summary.record(result)

    def group(self, interface_name: str) -> Optional[GroupResult]:
        for result in self.groups:
            if result.interface_name == interface_name:
                return result
        return None

    @property
    def failed(self) -> List[GroupResult]:
        return [g for g in self.groups if not g.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'passed': self.passed,
            'reason': self.reason,
            'summary': self.summary.to_dict(),
            'groups': [g.to_dict() for g in self.groups],
            'skipped': [s.to_dict() for s in self.skipped],
            'down': [r.to_dict() for r in self.down],
            'duplicates': [d.to_dict() for d in self.duplicates],
        }
