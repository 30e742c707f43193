"""
Shared fixtures.

The "fugazi" data set: seven dinners between 2004 and 2008, all at 07:57 UTC
except the unknown one. Dates are interpreted in UTC so results do not depend
on the machine's zone.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

import pytest

from vulcan import (
    InvalidRequest,
    Mappings,
    MemoryQueryExecutor,
    PagingConfiguration,
    SearchRequest,
    Sort,
    SortRequest,
    SystemIdFields,
    TokenParameter,
    Vulcan,
    VulcanConfiguration,
    return_nothing,
    use_url,
)
from vulcan.filters import select, select_in_list, select_not_null

UTC = timezone.utc


class Food(str, Enum):
    NACHOS = "NACHOS"
    TACOS = "TACOS"
    EVEN_MORE_NACHOS = "EVEN_MORE_NACHOS"


def _record(id_: int, name: str, date: str, food: str | None, base: str | None) -> dict:
    when = datetime.fromisoformat(date.replace("Z", "+00:00"))
    return {
        "id": id_,
        "name": name,
        "date": when,
        "millis": int(when.timestamp()) * 1000,
        "food": food,
        "base": base,
    }


RECORDS = [
    _record(1, "unknown", "2004-01-23T04:04:00Z", None, None),
    _record(2, "nachos2005", "2005-01-21T07:57:00Z", "NACHOS", "CHIPS"),
    _record(3, "moreNachos2005", "2005-01-22T07:57:00Z", "EVEN_MORE_NACHOS", "CHIPS"),
    _record(4, "tacos2005", "2005-01-23T07:57:00Z", "TACOS", "TORTILLAS"),
    _record(5, "tacos2006", "2006-01-21T07:57:00Z", "TACOS", "TORTILLAS"),
    _record(6, "tacos2007", "2007-01-21T07:57:00Z", "TACOS", "TORTILLAS"),
    _record(7, "tacos2008", "2008-01-21T07:57:00Z", "TACOS", "TORTILLAS"),
]


def epoch_millis(value: str) -> int:
    return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()) * 1000


def name_and_food(value: str) -> dict[str, str]:
    parts = value.split(":")
    if len(parts) != 2:
        raise InvalidRequest.bad_parameter("nameAndFood", value, "format is name:food")
    return {"name": parts[0], "food": parts[1]}


def food_is_supported(token: TokenParameter) -> bool:
    if (
        token.is_system_explicit_and_unsupported("http://food")
        or token.is_code_explicit_and_unsupported(*Food)
        or token.has_explicitly_no_system()
    ):
        return False
    return True


def food_specification(token: TokenParameter):
    return (
        token.behavior()
        .on_explicit_system_and_explicit_code(lambda s, c: select("food", c))
        .on_any_system_and_explicit_code(lambda c: select("food", c))
        .on_no_system_and_explicit_code(lambda c: select("food", c))
        .on_explicit_system_and_any_code(lambda s: select_in_list("food", [f.value for f in Food]))
        .execute()
    )


def food_specification_nullable(token: TokenParameter):
    return (
        token.behavior()
        .on_explicit_system_and_explicit_code(lambda s, c: select("food", c))
        .on_any_system_and_explicit_code(lambda c: select("food", c))
        .on_no_system_and_explicit_code(lambda c: select("food", c))
        .on_explicit_system_and_any_code(lambda s: select_not_null("food"))
        .execute()
    )


def remove_food_prefix(value: str) -> str:
    return value[len("food_") :] if value.startswith("food_") else value


FOOD_IDS = (
    SystemIdFields()
    .add("http://food", "food")
    .add("http://food-with-prefix", "food", remove_food_prefix)
    .add_with_custom_system_and_code_handler(
        "http://food-custom", "food", lambda system, code: select("food", code)
    )
)


def food_specification_helper(token: TokenParameter):
    return (
        token.behavior()
        .on_explicit_system_and_explicit_code(FOOD_IDS.match_system_and_code())
        .on_any_system_and_explicit_code(lambda c: select("food", c))
        .on_no_system_and_explicit_code(lambda c: select("food", c))
        .on_explicit_system_and_any_code(FOOD_IDS.match_system_only())
        .execute()
    )


def food_reference_is_supported(reference) -> bool:
    if reference.url is not None and reference.url != (
        f"https://goodfood.com/mexican/{reference.public_id}"
    ):
        return False
    return reference.type in ("mexican", "italian")


def sortable_parameters(request: SortRequest) -> Sort | None:
    for parameter in request.sorting:
        if parameter.parameter_name == "xname":
            return Sort.by("name", direction=parameter.direction).and_then(Sort.by("id"))
    return None


def fugazi_configuration() -> VulcanConfiguration:
    return VulcanConfiguration(
        paging=PagingConfiguration(
            page_parameter="page",
            count_parameter="count",
            default_count=30,
            max_count=100,
            base_url_strategy=use_url("http://vulcan.com"),
            sort=Sort.by("id"),
            sortable_parameters=sortable_parameters,
        ),
        mappings=(
            Mappings()
            .string("name")
            .string("xname", "name")
            .string("foodOrBase", {"food", "base"})
            .value("namevalue", "name")
            .value("millis", converter=epoch_millis)
            .value("xmillis", "millis", epoch_millis)
            .values("nameAndFood", name_and_food)
            .date_as_instant("xdate", "date", zone=UTC)
            .date_as_epoch_millis("ydate", "millis", zone=UTC)
            .csv_list("food")
            .tokens("foodSpecToken", food_is_supported, food_specification)
            .tokens("foodSpecNullable", food_is_supported, food_specification_nullable)
            .tokens(
                "foodSpecHelper",
                lambda t: t.has_explicit_system() or t.has_explicit_code(),
                food_specification_helper,
            )
            .reference(
                "foodref",
                "name",
                {"mexican", "italian"},
                default_resource_type="mexican",
                is_supported=food_reference_is_supported,
            )
            .get()
        ),
        default_query=return_nothing(),
    )


@pytest.fixture
def records() -> list[dict]:
    return [dict(r) for r in RECORDS]


@pytest.fixture
def executor(records) -> MemoryQueryExecutor:
    return MemoryQueryExecutor(records)


@pytest.fixture
def fugazi(executor) -> Vulcan:
    return Vulcan(executor=executor, config=fugazi_configuration())


@pytest.fixture
def search(fugazi):
    """Run a query string against the fugazi data set, returning record names."""

    def _search(query: str) -> list[str]:
        result = fugazi.search(SearchRequest.from_url(f"http://localhost/fugazi?{query}"))
        return [entity["name"] for entity in result.entities]

    return _search
