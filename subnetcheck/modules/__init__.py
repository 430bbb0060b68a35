"""
Subnet compatibility analysis modules.
"""
from .addressing import network_address, parse_ipv4, prefix_mask
from .analyzer import analyze
from .grouping import build_p2p_buckets, group_by_interface
from .ingest import load_path, parse_host_output

__all__ = [
    'analyze',
    'build_p2p_buckets',
    'group_by_interface',
    'load_path',
    'network_address',
    'parse_host_output',
    'parse_ipv4',
    'prefix_mask',
]
