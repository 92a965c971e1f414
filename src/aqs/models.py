"""Value types passed between the query builders and the client."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

import pandas as pd

from aqs.endpoints import Endpoint, fields_for
from aqs.validators import as_codes, normalize_params

ParamCodes = Union[str, int, Iterable[Union[str, int]]]


@dataclass(frozen=True)
class UserCredential:
    """Email/key pair identifying the caller to AQS."""

    email: str
    key: str

    def __repr__(self) -> str:
        return f"UserCredential(email={self.email!r}, key='***')"

    def as_params(self) -> Dict[str, str]:
        return {"email": self.email, "key": self.key}


@dataclass
class QuerySpec:
    """Every field a data query can carry; unused fields stay None."""

    param: Optional[ParamCodes] = None
    bdate: Optional[str] = None
    edate: Optional[str] = None
    state: Optional[str] = None
    county: Optional[str] = None
    site: Optional[str] = None
    cbsa: Optional[str] = None
    minlat: Optional[float] = None
    maxlat: Optional[float] = None
    minlon: Optional[float] = None
    maxlon: Optional[float] = None
    cbdate: Optional[str] = None
    cedate: Optional[str] = None

    def __post_init__(self) -> None:
        # param is read more than once; one-shot iterables must be materialized
        if self.param is not None and not isinstance(self.param, (str, int)):
            self.param = as_codes(self.param)

    def as_fields(self) -> Dict[str, Any]:
        """Return the supplied fields with ``param`` in its wire form."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.name] = normalize_params(value) if f.name == "param" else value
        return out

    def effective_fields(self, selector: Union[Endpoint, str]) -> Dict[str, Any]:
        """Project the supplied fields onto what ``selector`` accepts."""
        required, optional = fields_for(selector)
        accepted = required | optional
        return {name: value for name, value in self.as_fields().items() if name in accepted}

    def missing_required(self, selector: Union[Endpoint, str]) -> FrozenSet[str]:
        required, _ = fields_for(selector)
        return frozenset(name for name in required if _is_blank(getattr(self, name)))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list)):
        return not value
    return False


@dataclass
class QueryResult:
    """Tabular AQS payload plus the response header."""

    data: pd.DataFrame
    header: Dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> Optional[str]:
        return self.header.get("status")

    @property
    def rows(self) -> int:
        return len(self.data)

    @property
    def url(self) -> Optional[str]:
        return self.header.get("url")

    @property
    def empty(self) -> bool:
        return self.data.empty

    def records(self) -> List[Dict[str, Any]]:
        return self.data.to_dict(orient="records")
