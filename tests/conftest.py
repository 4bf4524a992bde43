"""
Shared fixtures for rdapresolve tests.

Provides small bootstrap registry documents, a stub retrieval collaborator
and a resolver wired to a temporary cache directory.
"""

import json
from datetime import timedelta

import pytest

from rdapresolve.config import Config
from rdapresolve.errors import RegistryFetchError
from rdapresolve.models.bootstrap import RegistryType
from rdapresolve.services.bootstrap_service import BootstrapResolver
from rdapresolve.services.cache_service import CacheService


def registry_document(services, description="Test registry"):
    """Encode a bootstrap registry document the way IANA publishes it."""
    return json.dumps(
        {
            "description": description,
            "publication": "2024-01-01T00:00:00Z",
            "services": services,
            "version": "1.0",
        }
    ).encode()


IPV4_SERVICES = [
    [["10.0.0.0/8"], ["https://rdap.a.example/"]],
    [["10.1.0.0/16"], ["https://rdap.b.example/"]],
    [["1.0.0.0/8", "27.0.0.0/8"], ["https://rdap.apnic.net/", "http://rdap.apnic.net/"]],
    [["10.1.0.0/16"], ["https://rdap.duplicate.example/"]],
]

IPV6_SERVICES = [
    [["2001:db8::/32"], ["https://rdap.v6.example/"]],
    [["2001:db8:1::/48"], ["https://rdap.v6-narrow.example/"]],
]

DNS_SERVICES = [
    [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
    [["uk"], ["https://rdap.nominet.uk/uk/"]],
    [["co.uk"], ["https://rdap.nominet.uk/co/"]],
]

ASN_SERVICES = [
    [["1-100000"], ["https://rdap.wide.example/"]],
    [["15000-16000"], ["https://rdap.arin.net/registry/"]],
    [["15169"], ["https://rdap.single.example/"]],
    [["64512-65534"], ["https://rdap.private.example/"]],
]

OBJECT_TAG_SERVICES = [
    [["rdap@arin.net"], ["ARIN"], ["https://rdap.arin.net/registry/"]],
    [["rdap@ripe.net"], ["RIPE"], ["https://rdap.db.ripe.net/"]],
    [["ops@example.net"], ["ARINX"], ["https://rdap.arinx.example/"]],
]


@pytest.fixture
def documents():
    return {
        RegistryType.IPV4: registry_document(IPV4_SERVICES),
        RegistryType.IPV6: registry_document(IPV6_SERVICES),
        RegistryType.DNS: registry_document(DNS_SERVICES),
        RegistryType.ASN: registry_document(ASN_SERVICES),
        RegistryType.OBJECT_TAGS: registry_document(OBJECT_TAG_SERVICES),
    }


class StubFetcher:
    """Retrieval collaborator serving in-memory documents."""

    def __init__(self, documents):
        self.documents = documents
        self.calls = []
        self.fail = False

    def __call__(self, registry_type):
        self.calls.append(registry_type)
        if self.fail or registry_type not in self.documents:
            raise RegistryFetchError(f"cannot fetch {registry_type.value}")
        return self.documents[registry_type]


@pytest.fixture
def fetcher(documents):
    return StubFetcher(documents)


@pytest.fixture
def config(tmp_path):
    return Config(
        cache_dir=tmp_path / "cache",
        cache_ttl=3600,
        serve_stale=True,
        bootstrap_urls={},
        tld_overrides={},
        rdap_timeout=5,
        max_concurrent_lookups=4,
        log_level="INFO",
    )


@pytest.fixture
def cache(config):
    return CacheService(config.cache_dir, ttl=timedelta(seconds=config.cache_ttl))


@pytest.fixture
def resolver(config, cache, fetcher):
    return BootstrapResolver(config, cache=cache, fetcher=fetcher)
