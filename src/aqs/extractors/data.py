"""Query builders for the AQS data services (sampleData, dailyData, annualData).

All three services share one builder: it validates the date range, the
optional change window and the parameter codes, projects the supplied fields
onto what the chosen endpoint accepts, and hands the request to the shared
client. ``fetch_data_by_year`` splits longer ranges into the per-year
requests AQS requires.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import pandas as pd

from aqs import _client
from aqs.credentials import CredentialProvider, resolve_user
from aqs.endpoints import Endpoint, check_service
from aqs.errors import InvalidDateFormat, RangeOrderError
from aqs.logging_config import get_logger
from aqs.models import ParamCodes, QueryResult, QuerySpec, UserCredential
from aqs.validators import as_codes, validate_query

logger = get_logger(__name__)

User = Union[UserCredential, CredentialProvider, None]


def fetch_data(
    service: str,
    user: User,
    endpoint: Union[Endpoint, str] = Endpoint.BY_SITE,
    param: Optional[ParamCodes] = None,
    bdate: Optional[str] = None,
    edate: Optional[str] = None,
    state: Optional[str] = None,
    county: Optional[str] = None,
    site: Optional[str] = None,
    cbdate: Optional[str] = None,
    cedate: Optional[str] = None,
    cbsa: Optional[str] = None,
    minlat: Optional[float] = None,
    maxlat: Optional[float] = None,
    minlon: Optional[float] = None,
    maxlon: Optional[float] = None,
    **options: Any,
) -> QueryResult:
    """Validate a query, keep only the fields ``endpoint`` accepts, and send it.

    Args:
        service: "sampleData", "dailyData" or "annualData"
        user: Credential, credential provider, or None for the environment
        endpoint: Geographic selector; see ``aqs.endpoints.SCHEMAS``
        param: One to five AQS parameter codes
        bdate, edate: YYYYMMDD bounds within a single calendar year
        cbdate, cedate: Optional YYYYMMDD "last changed" window, both or neither
        **options: Passed to ``aqs._client.aqs_get`` (session, timeout, ...)

    Fields the endpoint does not accept are dropped. Required fields that were
    not supplied are only logged; AQS reports them in its response.
    """
    check_service(service)
    endpoint = Endpoint.coerce(endpoint)
    spec = QuerySpec(
        param=param,
        bdate=bdate,
        edate=edate,
        state=state,
        county=county,
        site=site,
        cbsa=cbsa,
        minlat=minlat,
        maxlat=maxlat,
        minlon=minlon,
        maxlon=maxlon,
        cbdate=cbdate,
        cedate=cedate,
    )
    validate_query(spec)

    fields = spec.effective_fields(endpoint)
    dropped = sorted(set(spec.as_fields()) - set(fields))
    if dropped:
        logger.debug(f"{service}/{endpoint}: ignoring fields not used by this endpoint: {dropped}")
    missing = spec.missing_required(endpoint)
    if missing:
        logger.warning(f"{service}/{endpoint}: required fields not supplied: {sorted(missing)}")

    return _client.aqs_get(service, endpoint, resolve_user(user), fields, **options)


def sample_data(user: User, endpoint: Union[Endpoint, str] = Endpoint.BY_SITE, **query: Any) -> QueryResult:
    """Raw sample measurements; arguments as for ``fetch_data``."""
    return fetch_data("sampleData", user, endpoint, **query)


def daily_data(user: User, endpoint: Union[Endpoint, str] = Endpoint.BY_SITE, **query: Any) -> QueryResult:
    """Daily summaries calculated by AQS; arguments as for ``fetch_data``."""
    return fetch_data("dailyData", user, endpoint, **query)


def annual_data(user: User, endpoint: Union[Endpoint, str] = Endpoint.BY_SITE, **query: Any) -> QueryResult:
    """Annual summaries calculated by AQS; arguments as for ``fetch_data``."""
    return fetch_data("annualData", user, endpoint, **query)


def build_year_chunks(start: date | str, end: date | str) -> Iterator[Tuple[str, str]]:
    """Yield (bdate, edate) strings for each calendar-year chunk between start and end.

    Accepts dates or strings pandas can parse (ISO or YYYYMMDD). Returns
    strings in YYYYMMDD format.
    """
    s = _to_date(start, "bdate")
    e = _to_date(end, "edate")
    if s > e:
        raise RangeOrderError("'bdate' must be the same as or prior to 'edate'.")
    for year in range(s.year, e.year + 1):
        b = s.strftime("%Y%m%d") if year == s.year else f"{year}0101"
        ed = e.strftime("%Y%m%d") if year == e.year else f"{year}1231"
        yield b, ed


def _to_date(value: date | str, name: str) -> date:
    compact = isinstance(value, str) and len(value) == 8 and value.isdigit()
    try:
        return pd.to_datetime(value, format="%Y%m%d" if compact else None).date()
    except (TypeError, ValueError) as exc:
        raise InvalidDateFormat(f"'{name}' is not a recognizable date: {value!r}") from exc


def fetch_data_by_year(
    service: str,
    user: User,
    endpoint: Union[Endpoint, str],
    param: ParamCodes,
    bdate: date | str,
    edate: date | str,
    **query: Any,
) -> Iterator[Tuple[str, QueryResult]]:
    """Return an iterator of (year, QueryResult), one per calendar year between bdate and edate.

    The service, endpoint, date bounds and credential are checked when this is
    called; each request is sent as the iterator is advanced. Every chunk is a
    regular ``fetch_data`` call made with the same credential.
    """
    check_service(service)
    endpoint = Endpoint.coerce(endpoint)
    chunks = list(build_year_chunks(bdate, edate))
    codes = as_codes(param)
    credential = resolve_user(user)
    return _iter_years(service, credential, endpoint, codes, chunks, query)


def _iter_years(
    service: str,
    credential: UserCredential,
    endpoint: Endpoint,
    codes: List[str],
    chunks: List[Tuple[str, str]],
    query: Dict[str, Any],
) -> Iterator[Tuple[str, QueryResult]]:
    for b, e in chunks:
        yield b[:4], fetch_data(service, credential, endpoint, param=codes, bdate=b, edate=e, **query)
