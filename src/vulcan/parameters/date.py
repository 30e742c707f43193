"""
FHIR date search parameters.

See http://hl7.org/fhir/R4/search.html#date and
http://hl7.org/fhir/R4/search.html#prefix

    [${prefix}]${date}

Where ${prefix} is one of eq, ne, gt, lt, ge, le, sa, eb, ap (case
insensitive, default eq) and ${date} is one of

    YYYY
    YYYY-MM
    YYYY-MM-DD
    YYYY-MM-DDTHH:MM:SS
    YYYY-MM-DDTHH:MM:SSZ
    YYYY-MM-DDTHH:MM:SS+HH:MM   (or -HH:MM)

The literal length of the date decides its fidelity, and the fidelity decides
how wide the searched range is: ``2005`` covers the whole year, ``2005-01``
the whole month, and so on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Protocol

from dateutil import tz
from dateutil.relativedelta import relativedelta

from ..errors import ConfigurationError, InvalidRequest
from ..request import is_blank

DATE_FORMAT_HELP = "Expected: [EQ|NE|GT|LT|GE|LE|SA|EB|AP]YYYY[-MM][-DD]['T'HH:MM:SS][Z|(+|-)HH:MM]"

ONE_MILLISECOND = timedelta(milliseconds=1)

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
LATEST = datetime.max.replace(tzinfo=timezone.utc)


class DateOperator(str, Enum):
    """FHIR date prefixes."""

    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    LT = "LT"
    GE = "GE"
    LE = "LE"
    SA = "SA"
    EB = "EB"
    AP = "AP"


class DateFidelity(str, Enum):
    """How precisely a date was specified, e.g. ap2005 vs ap2005-01-21."""

    YEAR = "YEAR"
    MONTH = "MONTH"
    DAY = "DAY"
    LESS_THAN_A_DAY = "LESS_THAN_A_DAY"


# Literal length of the date portion -> (fidelity, pattern, period length)
_FORMATS: dict[int, tuple[DateFidelity, re.Pattern[str], relativedelta]] = {
    4: (DateFidelity.YEAR, re.compile(r"^[0-9]{4}$"), relativedelta(years=1)),
    7: (DateFidelity.MONTH, re.compile(r"^[0-9]{4}-[0-9]{2}$"), relativedelta(months=1)),
    10: (DateFidelity.DAY, re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"), relativedelta(days=1)),
    19: (
        DateFidelity.LESS_THAN_A_DAY,
        re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}$"),
        relativedelta(seconds=1),
    ),
    20: (
        DateFidelity.LESS_THAN_A_DAY,
        re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z$"),
        relativedelta(seconds=1),
    ),
    25: (
        DateFidelity.LESS_THAN_A_DAY,
        re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}[+-][0-9]{2}:[0-9]{2}$"),
        relativedelta(seconds=1),
    ),
}


@dataclass(frozen=True)
class SearchableDate:
    """
    A parsed date search value, e.g. ``createdondate=gt2005``.

    Malformed values are rejected here, at construction, with InvalidRequest.
    Bounds are inclusive, timezone aware and expressed in UTC.
    """

    parameter_name: str
    operator_and_date: str
    operator: DateOperator
    date: str
    fidelity: DateFidelity
    lower_bound: datetime
    upper_bound: datetime

    @classmethod
    def parse(
        cls,
        parameter_name: str,
        operator_and_date: str | None,
        zone: tzinfo | None = None,
    ) -> SearchableDate:
        """
        Parse a date search value.

        Args:
            parameter_name: Request parameter name, used in error messages
            operator_and_date: Raw value, e.g. ``ap2005-01-21``
            zone: Zone used for partial dates and zone-less times
                (default: the local zone)

        Returns:
            SearchableDate with computed bounds

        Raises:
            InvalidRequest: If the prefix or date cannot be parsed
        """

        def invalid() -> InvalidRequest:
            return InvalidRequest.bad_parameter(parameter_name, operator_and_date, DATE_FORMAT_HELP)

        if is_blank(operator_and_date) or len(operator_and_date) <= 1:
            raise invalid()
        if operator_and_date[0].isalpha():
            try:
                operator = DateOperator(operator_and_date[:2].upper())
            except ValueError:
                raise invalid() from None
            date = operator_and_date[2:]
        else:
            operator = DateOperator.EQ
            date = operator_and_date

        date_format = _FORMATS.get(len(date))
        if date_format is None:
            raise invalid()
        fidelity, pattern, period = date_format
        if not pattern.fullmatch(date):
            raise invalid()

        zone = zone or tz.tzlocal()
        try:
            lower = _lower_bound(date, fidelity, zone)
            lower_bound = lower.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            raise invalid() from None
        upper_bound = _upper_bound(lower, period)
        return cls(
            parameter_name=parameter_name,
            operator_and_date=operator_and_date,
            operator=operator,
            date=date,
            fidelity=fidelity,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )


def _lower_bound(date: str, fidelity: DateFidelity, zone: tzinfo) -> datetime:
    if fidelity is DateFidelity.YEAR:
        return datetime(int(date), 1, 1, tzinfo=zone)
    if fidelity is DateFidelity.MONTH:
        return datetime(int(date[0:4]), int(date[5:7]), 1, tzinfo=zone)
    if fidelity is DateFidelity.DAY:
        return datetime(int(date[0:4]), int(date[5:7]), int(date[8:10]), tzinfo=zone)
    instant = datetime.fromisoformat(date.replace("Z", "+00:00"))
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=zone)
    return instant


def _upper_bound(lower: datetime, period: relativedelta) -> datetime:
    """Last millisecond of the period, capped at the last representable instant."""
    try:
        return (lower + period - ONE_MILLISECOND).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return LATEST


class DateApproximation(Protocol):
    """Pluggable widening of the searched range for the ``ap`` prefix."""

    def expand_lower_bound(self, date: SearchableDate) -> datetime: ...

    def expand_upper_bound(self, date: SearchableDate) -> datetime: ...


@dataclass(frozen=True)
class FixedAmountDateApproximation:
    """
    Expands the bounds a fixed amount based on the fidelity of the search.

    Instances MUST be configured with a duration for each fidelity that can
    be encountered; a missing one is a configuration error.
    """

    amounts: dict[DateFidelity, timedelta] = field(default_factory=dict)

    def amount_for(self, fidelity: DateFidelity) -> timedelta:
        amount = self.amounts.get(fidelity)
        if amount is None:
            raise ConfigurationError(f"No amount for {fidelity.value} configured.")
        return amount

    def expand_lower_bound(self, date: SearchableDate) -> datetime:
        amount = self.amount_for(date.fidelity)
        try:
            return date.lower_bound - amount
        except OverflowError:
            return EARLIEST

    def expand_upper_bound(self, date: SearchableDate) -> datetime:
        amount = self.amount_for(date.fidelity)
        try:
            return date.upper_bound + amount
        except OverflowError:
            return LATEST


def default_graduated_approximation() -> FixedAmountDateApproximation:
    """
    Fixed amounts that grow as fidelity decreases.

    A general search covers more ground: ap2005 searches a much larger range
    than ap2005-01-21.
    """
    return FixedAmountDateApproximation(
        amounts={
            DateFidelity.YEAR: timedelta(days=365),
            DateFidelity.MONTH: timedelta(days=30),
            DateFidelity.DAY: timedelta(days=3),
            DateFidelity.LESS_THAN_A_DAY: timedelta(days=1),
        }
    )
