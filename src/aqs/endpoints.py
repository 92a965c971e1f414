"""Endpoint selectors and the fields each one accepts.

The same table applies to sampleData, dailyData and annualData.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Tuple, Union

from aqs.errors import UnknownEndpointError, UnknownServiceError

SERVICES = ("sampleData", "dailyData", "annualData")


class Endpoint(str, Enum):
    BY_SITE = "bySite"
    BY_COUNTY = "byCounty"
    BY_STATE = "byState"
    BY_BOX = "byBox"
    BY_CBSA = "byCBSA"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: Union["Endpoint", str]) -> "Endpoint":
        """Accept an Endpoint or its wire name ("bySite", ...)."""
        try:
            return cls(value)
        except ValueError:
            names = ", ".join(member.value for member in cls)
            raise UnknownEndpointError(f"'endpoint' must be one of {names}; got {value!r}.") from None


_DATE_FIELDS = ("param", "bdate", "edate")
_CHANGE_WINDOW = frozenset({"cbdate", "cedate"})

SCHEMAS: Dict[Endpoint, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    Endpoint.BY_SITE: (frozenset(_DATE_FIELDS + ("state", "county", "site")), _CHANGE_WINDOW),
    Endpoint.BY_COUNTY: (frozenset(_DATE_FIELDS + ("state", "county")), _CHANGE_WINDOW),
    Endpoint.BY_STATE: (frozenset(_DATE_FIELDS + ("state",)), _CHANGE_WINDOW),
    Endpoint.BY_BOX: (frozenset(_DATE_FIELDS + ("minlat", "maxlat", "minlon", "maxlon")), _CHANGE_WINDOW),
    Endpoint.BY_CBSA: (frozenset(_DATE_FIELDS + ("cbsa",)), _CHANGE_WINDOW),
}


def fields_for(selector: Union[Endpoint, str]) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Return ``(required, optional)`` field names for ``selector``."""
    return SCHEMAS[Endpoint.coerce(selector)]


def accepted_fields(selector: Union[Endpoint, str]) -> FrozenSet[str]:
    required, optional = fields_for(selector)
    return required | optional


def check_service(service: str) -> str:
    if service not in SERVICES:
        raise UnknownServiceError(f"'service' must be one of {', '.join(SERVICES)}; got {service!r}.")
    return service
