"""Client for the EPA Air Quality System (AQS) data API.

Validates sampleData, dailyData and annualData queries for the five
geographic selectors and returns the response as a ``QueryResult``.
"""

from aqs.credentials import (
    CredentialProvider,
    EnvCredentialProvider,
    StaticCredentialProvider,
    create_user,
    signup,
)
from aqs.endpoints import SERVICES, Endpoint, fields_for
from aqs.errors import (
    AQSError,
    AQSRemoteError,
    AQSValidationError,
    CrossYearError,
    IncompletePairError,
    InvalidDateFormat,
    MalformedResponseError,
    MissingCredentialsError,
    ParamCountError,
    RangeOrderError,
    TooManyParamsError,
    TransportError,
    UnknownEndpointError,
    UnknownServiceError,
)
from aqs.extractors.data import (
    annual_data,
    daily_data,
    fetch_data,
    fetch_data_by_year,
    sample_data,
)
from aqs.extractors.wrappers import (
    annual_data_by_cbsa,
    annual_data_by_county,
    annual_data_by_site,
    annual_data_by_state,
    daily_data_by_cbsa,
    daily_data_by_county,
    daily_data_by_site,
    daily_data_by_state,
    sample_data_by_cbsa,
    sample_data_by_county,
    sample_data_by_site,
    sample_data_by_state,
)
from aqs.logging_config import setup_logging
from aqs.models import QueryResult, QuerySpec, UserCredential
from aqs.validators import is_valid_date_string, validate_change_window, validate_date_range

__version__ = "0.1.0"

__all__ = [
    "AQSError",
    "AQSRemoteError",
    "AQSValidationError",
    "CredentialProvider",
    "CrossYearError",
    "Endpoint",
    "EnvCredentialProvider",
    "IncompletePairError",
    "InvalidDateFormat",
    "MalformedResponseError",
    "MissingCredentialsError",
    "ParamCountError",
    "QueryResult",
    "QuerySpec",
    "RangeOrderError",
    "SERVICES",
    "StaticCredentialProvider",
    "TooManyParamsError",
    "TransportError",
    "UnknownEndpointError",
    "UnknownServiceError",
    "UserCredential",
    "annual_data",
    "annual_data_by_cbsa",
    "annual_data_by_county",
    "annual_data_by_site",
    "annual_data_by_state",
    "create_user",
    "daily_data",
    "daily_data_by_cbsa",
    "daily_data_by_county",
    "daily_data_by_site",
    "daily_data_by_state",
    "fetch_data",
    "fetch_data_by_year",
    "fields_for",
    "is_valid_date_string",
    "sample_data",
    "sample_data_by_cbsa",
    "sample_data_by_county",
    "sample_data_by_site",
    "sample_data_by_state",
    "setup_logging",
    "signup",
    "validate_change_window",
    "validate_date_range",
]
