"""
IP address and CIDR canonicalization.

Handles the address forms users and registries actually write:

- Standard IPv4: ``192.168.1.1``
- Standard IPv6: ``2001:db8::1``
- Shorthand IPv4: ``1.1`` -> ``1.0.0.1``, ``1.2.3`` -> ``1.2.0.3``
- Integer IPv4: ``16843009`` -> ``1.1.1.1``
- CIDR notation: ``8.8.8.0/24``, ``1.1/16`` -> ``1.0.0.1/16``
"""

import ipaddress

from ..errors import InvalidFormatError

IPV4_MAX_PREFIX = 32
IPV6_MAX_PREFIX = 128

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


def _parse_uint(text: str) -> int | None:
    """Parse a plain unsigned decimal (no sign, spaces or underscores)."""
    if text and text.isascii() and text.isdigit():
        return int(text)
    return None


def _max_prefix(address: str) -> int:
    return IPV6_MAX_PREFIX if ":" in address else IPV4_MAX_PREFIX


def _expand_ipv4(numbers: list[int]) -> str:
    # Missing octets are zeros inserted before the last component.
    padding = [0] * (4 - len(numbers))
    octets = numbers[:-1] + padding + numbers[-1:]
    return ".".join(str(octet) for octet in octets)


def normalize_ip(value: str) -> str:
    """
    Normalize an IP address or CIDR string.

    Raises:
        InvalidFormatError: if the input is not a valid address form.
    """
    text = value.strip()

    if "/" in text:
        address_part, _, prefix_part = text.partition("/")
        prefix = _parse_uint(prefix_part)
        if prefix is None:
            raise InvalidFormatError(f"Invalid prefix length in {value!r}")
        address = normalize_ip(address_part)
        if prefix > _max_prefix(address):
            raise InvalidFormatError(f"Prefix length out of range in {value!r}")
        return f"{address}/{prefix_part}"

    if ":" in text:
        if "%" in text:
            raise InvalidFormatError(f"Scoped IPv6 addresses are not supported: {value!r}")
        try:
            ipaddress.IPv6Address(text)
        except ValueError as e:
            raise InvalidFormatError(f"Invalid IPv6 address: {value!r}") from e
        return text

    parts = text.split(".")
    numbers: list[int] = []
    for part in parts:
        number = _parse_uint(part)
        if number is None:
            raise InvalidFormatError(f"Invalid IPv4 address: {value!r}")
        if number <= 255:
            numbers.append(number)
        elif len(parts) == 1 and number <= 0xFFFFFFFF:
            # A lone integer above one octet is a big-endian 32-bit address
            return str(ipaddress.IPv4Address(number))
        else:
            raise InvalidFormatError(f"Invalid IPv4 address: {value!r}")

    if len(numbers) > 4:
        raise InvalidFormatError(f"Too many IPv4 components: {value!r}")
    return _expand_ipv4(numbers)


def normalize_address(value: str) -> IPNetwork:
    """
    Normalize to a typed network.

    A plain address becomes a host network (/32 or /128); a CIDR base has
    the bits beyond its prefix masked to zero.
    """
    normalized = normalize_ip(value)
    return ipaddress.ip_network(normalized, strict=False)


def is_ip_like(value: str) -> bool:
    """Check if a string looks like an IP address or CIDR."""
    text = value.strip()

    # Contains colon -> likely IPv6
    if ":" in text:
        return True

    address_part = text.partition("/")[0]
    return all(c in "0123456789." for c in address_part)


def is_cidr(value: str) -> bool:
    """Check if the input is in CIDR notation."""
    parts = value.split("/")
    if len(parts) != 2:
        return False
    address_part, prefix_part = parts

    prefix = _parse_uint(prefix_part)
    if prefix is None or prefix > 255:
        return False

    try:
        normalized = normalize_ip(address_part)
    except InvalidFormatError:
        return False
    return prefix <= _max_prefix(normalized)


def extract_ip_from_cidr(value: str) -> str:
    """Return the normalized address part, or the raw part if it won't normalize."""
    address_part = value.partition("/")[0]
    try:
        return normalize_ip(address_part)
    except InvalidFormatError:
        return address_part
