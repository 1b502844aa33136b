import pytest
from pydantic import ValidationError
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse
from industry_matcher.integration.listing_query import (
    CompanySearchParams,
    build_search_url,
    resolve_industry_codes,
)


def query_of(url):
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


def test_url_contains_filters_and_industry_codes():
    params = CompanySearchParams(
        revenue_from=1000, revenue_to=50000, num_employees_from=10, num_employees_to=200,
        location="Stockholm", sort="revenueDesc",
    )
    url = build_search_url(params, page=2, industry_codes=["10002115", "10002102"])

    assert url.startswith("https://www.allabolag.se/segmentering?")
    q = query_of(url)
    assert q["host"] == "www.allabolag.se"
    assert q["revenueFrom"] == "1000"
    assert q["revenueTo"] == "50000"
    assert q["numEmployeesFrom"] == "10"
    assert q["location"] == "Stockholm"
    assert q["sort"] == "revenueDesc"
    assert q["proffIndustryCode"] == "10002115,10002102"
    assert q["page"] == "2"


def test_url_omits_empty_filters():
    q = query_of(build_search_url(CompanySearchParams(), industry_codes=[]))
    assert q == {"host": "www.allabolag.se"}


@pytest.mark.parametrize("kwargs", [
    {"revenue_from": 10, "revenue_to": 5},
    {"profit_from": 10, "profit_to": 5},
    {"num_employees_from": 10},
    {"num_employees_from": 50, "num_employees_to": 10},
    {"industry_description": "ab"},
    {"sort": "alphabetical"},
])
def test_invalid_params_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        CompanySearchParams(**kwargs)


def test_resolve_industry_codes_uses_matcher():
    matcher = MagicMock()
    matcher.match_industries.return_value = ["10002115"]

    params = CompanySearchParams(industry_description="software development / saas")
    assert resolve_industry_codes(params, matcher) == ["10002115"]
    matcher.match_industries.assert_called_once_with("software development / saas")


def test_resolve_industry_codes_without_description():
    matcher = MagicMock()
    assert resolve_industry_codes(CompanySearchParams(), matcher) == []
    matcher.match_industries.assert_not_called()
