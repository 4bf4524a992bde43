"""
Exception hierarchy for bootstrap resolution and RDAP queries.
"""


class RdapError(Exception):
    """Base class for all rdapresolve errors."""


class InvalidFormatError(RdapError, ValueError):
    """Input cannot be normalized into an address, ASN or handle."""


class ClassificationAmbiguousError(RdapError, ValueError):
    """Input carries nothing that can be classified (e.g. blank)."""


class RegistryUnavailableError(RdapError):
    """No usable cached registry and retrieval failed."""


class RegistryFetchError(RdapError):
    """The retrieval collaborator could not download a registry document."""


class MalformedRegistryError(RdapError):
    """Registry bytes do not parse into the bootstrap structure."""


class NoAuthorityFoundError(RdapError):
    """Registry parsed fine but no service covers the identifier."""

    def __init__(self, identifier: str, registry_type: str):
        self.identifier = identifier
        self.registry_type = registry_type
        super().__init__(
            f"No RDAP service found for {identifier!r} in {registry_type} registry"
        )


class CacheError(RdapError):
    """Filesystem failure in the registry cache."""


class RDAPQueryError(RdapError):
    """Every RDAP server for an identifier failed."""
