"""Fixed-endpoint shortcuts for the AQS data services.

Each shortcut names the geography it needs as required arguments and passes
everything else (``cbdate``/``cedate``, ``session``, ``timeout``, ...)
straight to the matching builder in ``aqs.extractors.data``. There is no
``byBox`` shortcut; use the builders with ``endpoint="byBox"``.
"""
from __future__ import annotations

from typing import Any

from aqs.endpoints import Endpoint
from aqs.extractors.data import User, annual_data, daily_data, sample_data
from aqs.models import ParamCodes, QueryResult


def sample_data_by_site(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, site: str, **options: Any
) -> QueryResult:
    return sample_data(
        user, Endpoint.BY_SITE, param=param, bdate=bdate, edate=edate, state=state, county=county, site=site, **options
    )


def sample_data_by_county(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, **options: Any
) -> QueryResult:
    return sample_data(
        user, Endpoint.BY_COUNTY, param=param, bdate=bdate, edate=edate, state=state, county=county, **options
    )


def sample_data_by_state(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, **options: Any
) -> QueryResult:
    return sample_data(user, Endpoint.BY_STATE, param=param, bdate=bdate, edate=edate, state=state, **options)


def sample_data_by_cbsa(
    user: User, param: ParamCodes, bdate: str, edate: str, cbsa: str, **options: Any
) -> QueryResult:
    return sample_data(user, Endpoint.BY_CBSA, param=param, bdate=bdate, edate=edate, cbsa=cbsa, **options)


def daily_data_by_site(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, site: str, **options: Any
) -> QueryResult:
    return daily_data(
        user, Endpoint.BY_SITE, param=param, bdate=bdate, edate=edate, state=state, county=county, site=site, **options
    )


def daily_data_by_county(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, **options: Any
) -> QueryResult:
    return daily_data(
        user, Endpoint.BY_COUNTY, param=param, bdate=bdate, edate=edate, state=state, county=county, **options
    )


def daily_data_by_state(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, **options: Any
) -> QueryResult:
    return daily_data(user, Endpoint.BY_STATE, param=param, bdate=bdate, edate=edate, state=state, **options)


def daily_data_by_cbsa(
    user: User, param: ParamCodes, bdate: str, edate: str, cbsa: str, **options: Any
) -> QueryResult:
    return daily_data(user, Endpoint.BY_CBSA, param=param, bdate=bdate, edate=edate, cbsa=cbsa, **options)


def annual_data_by_site(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, site: str, **options: Any
) -> QueryResult:
    return annual_data(
        user, Endpoint.BY_SITE, param=param, bdate=bdate, edate=edate, state=state, county=county, site=site, **options
    )


def annual_data_by_county(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, county: str, **options: Any
) -> QueryResult:
    return annual_data(
        user, Endpoint.BY_COUNTY, param=param, bdate=bdate, edate=edate, state=state, county=county, **options
    )


def annual_data_by_state(
    user: User, param: ParamCodes, bdate: str, edate: str, state: str, **options: Any
) -> QueryResult:
    return annual_data(user, Endpoint.BY_STATE, param=param, bdate=bdate, edate=edate, state=state, **options)


def annual_data_by_cbsa(
    user: User, param: ParamCodes, bdate: str, edate: str, cbsa: str, **options: Any
) -> QueryResult:
    return annual_data(user, Endpoint.BY_CBSA, param=param, bdate=bdate, edate=edate, cbsa=cbsa, **options)


__all__ = [
    "sample_data_by_site",
    "sample_data_by_county",
    "sample_data_by_state",
    "sample_data_by_cbsa",
    "daily_data_by_site",
    "daily_data_by_county",
    "daily_data_by_state",
    "daily_data_by_cbsa",
    "annual_data_by_site",
    "annual_data_by_county",
    "annual_data_by_state",
    "annual_data_by_cbsa",
]
