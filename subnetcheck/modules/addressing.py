"""IPv4 network address arithmetic.

Every record passes through `network_address`, and grouping relies on it
returning identical values for identical inputs.
"""
import ipaddress
from typing import Tuple, Union

from ..exceptions import InvalidCIDR
from ..models import NetworkAddress

ALL_ONES = 0xFFFFFFFF
P2P_PREFIX_LENGTH = 31


def parse_ipv4(address: Union[str, int]) -> int:
    """Return the 32-bit value of a dotted-quad address (or pass an int through)."""
    if isinstance(address, bool):
        raise InvalidCIDR(f"Invalid IPv4 address: {address!r}", address)
    if isinstance(address, int):
        if not 0 <= address <= ALL_ONES:
            raise InvalidCIDR(f"IPv4 address out of range: {address}", address)
        return address
    try:
        return int(ipaddress.IPv4Address(str(address).strip()))
    except ipaddress.AddressValueError as e:
        raise InvalidCIDR(f"Invalid IPv4 address {address!r}: {e}", address) from e


def format_ipv4(value: int) -> str:
    return str(ipaddress.IPv4Address(value))


def validate_prefix_length(prefix_length) -> int:
    if isinstance(prefix_length, bool):
        raise InvalidCIDR(f"Invalid prefix length: {prefix_length!r}", prefix_length)
    try:
        prefix = int(prefix_length)
    except (TypeError, ValueError) as e:
        raise InvalidCIDR(f"Invalid prefix length: {prefix_length!r}", prefix_length) from e
    if isinstance(prefix_length, float) and prefix_length != prefix:
        raise InvalidCIDR(f"Prefix length is not an integer: {prefix_length!r}", prefix_length)
    if not 0 <= prefix <= 32:
        raise InvalidCIDR(f"Prefix length {prefix} outside [0, 32]", prefix_length)
    return prefix


def prefix_mask(prefix_length: int) -> int:
    """Netmask for a prefix length as a 32-bit integer."""
    prefix = validate_prefix_length(prefix_length)
    # A shift by 32 would leave bits above the mask width
    if prefix == 0:
        return 0
    return (ALL_ONES << (32 - prefix)) & ALL_ONES


def network_address(address: Union[str, int], prefix_length: int) -> NetworkAddress:
    """Mask `address` with `prefix_length`.

    Args:
        address: Dotted-quad string or 32-bit integer
        prefix_length: Integer in [0, 32]

    Returns:
        NetworkAddress carrying the masked value and the prefix length

    Raises:
        InvalidCIDR: If the address or prefix length is invalid
    """
    prefix = validate_prefix_length(prefix_length)
    return NetworkAddress(parse_ipv4(address) & prefix_mask(prefix), prefix)


def parse_cidr(cidr: str) -> Tuple[str, int]:
    """Split "a.b.c.d/p" into a validated (address, prefix) pair."""
    address, sep, prefix = str(cidr).strip().partition('/')
    if not sep:
        raise InvalidCIDR(f"Missing prefix length in {cidr!r}", cidr)
    parse_ipv4(address)
    return address, validate_prefix_length(prefix)


def record_network(record) -> NetworkAddress:
    return network_address(record.address, record.prefix_length)
