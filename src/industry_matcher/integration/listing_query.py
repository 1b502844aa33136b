"""
listing_query.py

Builds the company listing search URL. Matched industry codes are passed as
the `proffIndustryCode` filter.
"""

from typing import List, Literal, Optional, Sequence
from urllib.parse import urlencode

from pydantic import BaseModel, Field, model_validator

from industry_matcher.logger import get_logger

logger = get_logger(__name__)

LISTING_BASE_URL = "https://www.allabolag.se/segmentering"
LISTING_HOST = "www.allabolag.se"

SortOrder = Literal[
    "profitAsc",
    "profitDesc",
    "registrationDateDesc",
    "numEmployeesAsc",
    "numEmployeesDesc",
    "revenueAsc",
    "revenueDesc",
]


class CompanySearchParams(BaseModel):
    revenue_from: Optional[int] = Field(None, ge=-221349, le=192505000, description="Revenue lower bound (kSEK)")
    revenue_to: Optional[int] = Field(None, ge=-221349, le=192505000, description="Revenue upper bound (kSEK)")
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    profit_from: Optional[int] = Field(None, ge=-12153147, le=109441000)
    profit_to: Optional[int] = Field(None, ge=-12153147, le=109441000)
    num_employees_from: Optional[int] = Field(None, ge=0, le=100000)
    num_employees_to: Optional[int] = Field(None, ge=0, le=100000)
    sort: Optional[SortOrder] = None
    industry_description: Optional[str] = Field(
        None, min_length=3, max_length=500, description="Free-text industry, e.g. 'software development / saas'"
    )

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.revenue_from is not None and self.revenue_to is not None and self.revenue_from > self.revenue_to:
            raise ValueError("Revenue from must be less than or equal to revenue to")
        if self.profit_from is not None and self.profit_to is not None and self.profit_from > self.profit_to:
            raise ValueError("Profit from must be less than or equal to profit to")
        if (self.num_employees_from is None) != (self.num_employees_to is None):
            raise ValueError("Both num_employees_from and num_employees_to must be provided if one is present.")
        if self.num_employees_from is not None and self.num_employees_from > self.num_employees_to:
            raise ValueError("Number of employees from must be less than or equal to number of employees to")
        return self


def build_search_url(
    params: CompanySearchParams,
    page: int = 1,
    industry_codes: Optional[Sequence[str]] = None,
) -> str:
    query = {"host": LISTING_HOST}

    optional = [
        ("revenueFrom", params.revenue_from),
        ("revenueTo", params.revenue_to),
        ("profitFrom", params.profit_from),
        ("profitTo", params.profit_to),
        ("numEmployeesFrom", params.num_employees_from),
        ("numEmployeesTo", params.num_employees_to),
        ("location", params.location),
        ("sort", params.sort),
    ]
    for key, value in optional:
        if value is not None:
            query[key] = str(value)

    if industry_codes:
        query["proffIndustryCode"] = ",".join(industry_codes)
        logger.info(f"Using industry codes: {', '.join(industry_codes)}")

    if page > 1:
        query["page"] = str(page)

    url = f"{LISTING_BASE_URL}?{urlencode(query)}"
    logger.debug(f"Built URL: {url}")
    return url


def resolve_industry_codes(params: CompanySearchParams, matcher) -> List[str]:
    """Industry codes for the search, or [] when no description was given."""
    if not params.industry_description:
        return []
    codes = matcher.match_industries(params.industry_description)
    logger.info(f"Found industry codes: {', '.join(codes) if codes else 'none'}")
    return codes
