"""
Models for RDAP query results and the jCard (RFC 7095) contact format.
"""

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class RDAPResult(BaseModel):
    """Result of an RDAP lookup."""

    target: str = Field(..., description="Identifier that was looked up")
    target_type: str = Field(..., description="Registry type the target resolved in")
    rdap_server: str = Field(..., description="Base URL that answered")
    response_data: dict[str, Any] = Field(default_factory=dict)
    success: bool
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class VCardAddress(BaseModel):
    """Structured ``adr`` property."""

    label: str | None = None
    po_box: str = ""
    extended: str = ""
    street: str = ""
    locality: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""


class VCardProperty(BaseModel):
    """One ``[name, parameters, type, value]`` jCard property."""

    name: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    value_type: str
    value: str | list[str]

    @classmethod
    def from_jcard(cls, item: Any) -> "VCardProperty | None":
        if not isinstance(item, list) or len(item) < 4:
            return None
        name, parameters, value_type, raw = item[:4]
        if not isinstance(name, str) or not isinstance(parameters, dict):
            return None
        if not isinstance(value_type, str):
            return None

        if isinstance(raw, str):
            value: str | list[str] = raw
        elif isinstance(raw, list):
            # Only all-string arrays are structured values
            value = list(raw) if all(isinstance(v, str) for v in raw) else []
        else:
            value = json.dumps(raw)

        return cls(name=name.lower(), parameters=parameters, value_type=value_type, value=value)


class VCard(BaseModel):
    """A contact card from an RDAP entity's ``vcardArray``."""

    properties: list[VCardProperty] = Field(default_factory=list)

    @classmethod
    def from_jcard(cls, data: Any) -> "VCard | None":
        """Parse ``["vcard", [...properties]]``; None if the envelope is wrong."""
        if not isinstance(data, list) or len(data) != 2 or data[0] != "vcard":
            return None
        if not isinstance(data[1], list):
            return None

        properties = []
        for item in data[1]:
            prop = VCardProperty.from_jcard(item)
            if prop is not None:
                properties.append(prop)
        return cls(properties=properties)

    def _text(self, name: str) -> str | None:
        for prop in self.properties:
            if prop.name == name:
                return prop.value if isinstance(prop.value, str) else None
        return None

    @property
    def name(self) -> str | None:
        return self._text("fn")

    @property
    def email(self) -> str | None:
        return self._text("email")

    @property
    def tel(self) -> str | None:
        return self._text("tel")

    @property
    def org(self) -> str | None:
        return self._text("org")

    @property
    def address(self) -> VCardAddress | None:
        prop = next((p for p in self.properties if p.name == "adr"), None)
        if prop is None or not isinstance(prop.value, list) or len(prop.value) < 7:
            return None
        label = prop.parameters.get("label")
        parts = prop.value
        return VCardAddress(
            label=label if isinstance(label, str) else None,
            po_box=parts[0],
            extended=parts[1],
            street=parts[2],
            locality=parts[3],
            region=parts[4],
            postal_code=parts[5],
            country=parts[6],
        )
