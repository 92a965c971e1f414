"""Validation of query arguments shared by every AQS data service.

Each check raises a specific ``AQSValidationError`` subclass on the first
violation so that a malformed request is never sent.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional, Tuple, Union

from aqs.errors import (
    CrossYearError,
    IncompletePairError,
    InvalidDateFormat,
    ParamCountError,
    RangeOrderError,
    TooManyParamsError,
)

if TYPE_CHECKING:
    from aqs.models import QuerySpec

DATE_FORMAT = "%Y%m%d"
MAX_PARAMS = 5


def is_valid_date_string(value: object) -> bool:
    """Return True when ``value`` is an 8-digit YYYYMMDD string naming a real date.

    >>> is_valid_date_string("20200229")
    True
    >>> is_valid_date_string("20190229")
    False
    """
    if not isinstance(value, str) or len(value) != 8:
        return False
    # strptime tolerates single-digit months/days, so require all digits
    if not (value.isascii() and value.isdigit()):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def _parse(value: str) -> datetime:
    return datetime.strptime(value, DATE_FORMAT)


def validate_date_range(
    begin: str,
    end: str,
    same_year_required: bool,
    names: Tuple[str, str] = ("bdate", "edate"),
) -> None:
    """Check a begin/end pair of YYYYMMDD strings.

    Raises:
        InvalidDateFormat: either string is malformed (begin is checked first)
        RangeOrderError: begin is later than end
        CrossYearError: ``same_year_required`` and the years differ
    """
    begin_name, end_name = names
    if not is_valid_date_string(begin):
        raise InvalidDateFormat(f"'{begin_name}' must be a string of length 8 in the format YYYYMMDD.")
    if not is_valid_date_string(end):
        raise InvalidDateFormat(f"'{end_name}' must be a string of length 8 in the format YYYYMMDD.")
    if _parse(begin) > _parse(end):
        raise RangeOrderError(f"'{begin_name}' must be the same as or prior to '{end_name}'.")
    if same_year_required and begin[:4] != end[:4]:
        raise CrossYearError(f"'{begin_name}' and '{end_name}' must be the same year.")


def validate_change_window(cbdate: Optional[str], cedate: Optional[str]) -> None:
    """Check the optional last-changed window; it is all or nothing."""
    if cbdate is None and cedate is None:
        return
    if cbdate is None or cedate is None:
        raise IncompletePairError("If 'cbdate' or 'cedate' is provided, the other must also be provided.")
    validate_date_range(cbdate, cedate, same_year_required=False, names=("cbdate", "cedate"))


def as_codes(param: Union[str, int, Iterable[Union[str, int]], None]) -> list[str]:
    """Materialize ``param`` as a list of code strings; iterables are read once."""
    if param is None:
        return []
    if isinstance(param, (str, int)):
        return [str(param)]
    return [str(code) for code in param]


def normalize_params(param: Union[str, int, Iterable[Union[str, int]], None]) -> str:
    """Return the wire form of ``param``: deduplicated codes joined by commas.

    The five-code limit applies to the codes as given, before duplicates are
    removed.
    """
    codes = as_codes(param)
    if len(codes) > MAX_PARAMS:
        raise TooManyParamsError(f"'param' is limited to {MAX_PARAMS} parameter codes in a single request.")
    if not codes:
        raise ParamCountError("'param' requires at least one parameter code.")
    return ",".join(dict.fromkeys(codes))


def validate_query(spec: "QuerySpec") -> None:
    """Run every shared check against ``spec`` in request order."""
    validate_date_range(spec.bdate, spec.edate, same_year_required=True)
    validate_change_window(spec.cbdate, spec.cedate)
    normalize_params(spec.param)
