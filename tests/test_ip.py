"""
Unit tests for rdapresolve.utils.ip

Covers IPv4 shorthand and integer expansion, IPv6 passthrough, CIDR
handling and the IP-likeness heuristic.
"""

import ipaddress

import pytest

from rdapresolve.errors import InvalidFormatError
from rdapresolve.utils.ip import (
    extract_ip_from_cidr,
    is_cidr,
    is_ip_like,
    normalize_address,
    normalize_ip,
)


class TestNormalizeIPv4:
    """Test suite for IPv4 normalization."""

    def test_standard_ipv4_unchanged(self):
        assert normalize_ip("192.168.1.1") == "192.168.1.1"
        assert normalize_ip("8.8.8.8") == "8.8.8.8"

    def test_shorthand_expansion(self):
        """Missing octets are zeros inserted before the last component."""
        assert normalize_ip("1.1") == "1.0.0.1"
        assert normalize_ip("1.2.3") == "1.2.0.3"
        assert normalize_ip("1") == "0.0.0.1"

    def test_integer_form(self):
        assert normalize_ip("16843009") == "1.1.1.1"
        assert normalize_ip("4294967295") == "255.255.255.255"

    def test_single_value_boundary(self):
        """255 takes the octet path, 256 is read as a 32-bit integer."""
        assert normalize_ip("255") == "0.0.0.255"
        assert normalize_ip("256") == "0.0.1.0"

    def test_whitespace_trimmed(self):
        assert normalize_ip("  10.1  ") == "10.0.0.1"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "1.2.3.4.5",
            "256.1.1.1",
            "1..2",
            "1.2.3.",
            "4294967296",
            "+1.2.3.4",
            "1_0.0.0.1",
            "a.b.c.d",
            "1.2.3.-4",
        ],
    )
    def test_invalid_ipv4(self, value):
        with pytest.raises(InvalidFormatError):
            normalize_ip(value)

    def test_integer_form_requires_single_component(self):
        """A large component is never reinterpreted inside a dotted address."""
        with pytest.raises(InvalidFormatError):
            normalize_ip("1.16843009")


class TestNormalizeIPv6:
    """Test suite for IPv6 passthrough."""

    def test_valid_ipv6_verbatim(self):
        assert normalize_ip("2001:db8::1") == "2001:db8::1"
        assert normalize_ip("::1") == "::1"
        assert normalize_ip("2001:0DB8:0000::1") == "2001:0DB8:0000::1"

    @pytest.mark.parametrize("value", ["2001:db8::g", "1:2:3", ":::", "fe80::1%eth0"])
    def test_invalid_ipv6(self, value):
        with pytest.raises(InvalidFormatError):
            normalize_ip(value)


class TestNormalizeCidr:
    """Test suite for CIDR normalization."""

    def test_cidr_passthrough(self):
        assert normalize_ip("8.8.8.0/24") == "8.8.8.0/24"

    def test_cidr_recursive_normalization(self):
        assert normalize_ip("1.1/16") == "1.0.0.1/16"

    def test_ipv6_cidr(self):
        assert normalize_ip("2001:db8::/32") == "2001:db8::/32"

    @pytest.mark.parametrize(
        "value", ["10.0.0.0/33", "2001:db8::/129", "10.0.0.0/", "10.0.0.0/x", "10/8/8", "x/8"]
    )
    def test_invalid_cidr(self, value):
        with pytest.raises(InvalidFormatError):
            normalize_ip(value)

    @pytest.mark.parametrize(
        "value", ["1.1", "1.2.3", "16843009", "10.0.0.0/8", "1.1/16", "2001:db8::1", "255"]
    )
    def test_idempotent(self, value):
        once = normalize_ip(value)
        assert normalize_ip(once) == once


class TestNormalizeAddress:
    """Test suite for typed normalization."""

    def test_plain_address_is_host_network(self):
        assert normalize_address("1.1") == ipaddress.ip_network("1.0.0.1/32")
        assert normalize_address("::1") == ipaddress.ip_network("::1/128")

    def test_cidr_base_is_masked(self):
        assert normalize_address("10.1.2.3/8") == ipaddress.ip_network("10.0.0.0/8")
        assert normalize_address("2001:db8::1/32") == ipaddress.ip_network("2001:db8::/32")


class TestIsIpLike:
    """Test suite for the IP-likeness heuristic."""

    def test_ip_like(self):
        assert is_ip_like("192.168.1.1")
        assert is_ip_like("1.1")
        assert is_ip_like("8.8.8.0/24")
        assert is_ip_like("2001:db8::1")
        assert is_ip_like("999.999")

    def test_not_ip_like(self):
        assert not is_ip_like("example.com")
        assert not is_ip_like("google")
        assert not is_ip_like("AS15169")


class TestIsCidr:
    """Test suite for CIDR detection."""

    def test_cidr(self):
        assert is_cidr("8.8.8.0/24")
        assert is_cidr("1.1/16")
        assert is_cidr("2001:db8::/32")
        assert is_cidr("2001:db8::/128")

    def test_not_cidr(self):
        assert not is_cidr("8.8.8.8")
        assert not is_cidr("example.com")
        assert not is_cidr("10.0.0.0/33")
        assert not is_cidr("10.0.0.0/256")
        assert not is_cidr("10.0.0.0/8/8")
        assert not is_cidr("example.com/8")


class TestExtractIpFromCidr:
    """Test suite for lenient address extraction."""

    def test_extracts_normalized_address(self):
        assert extract_ip_from_cidr("1.1/16") == "1.0.0.1"
        assert extract_ip_from_cidr("8.8.8.8") == "8.8.8.8"
        assert extract_ip_from_cidr("2001:db8::/32") == "2001:db8::"

    def test_invalid_passthrough(self):
        assert extract_ip_from_cidr("example.com/8") == "example.com"
        assert extract_ip_from_cidr("not-an-ip") == "not-an-ip"
