"""
Account, exchange-rate and news models.
"""

from dataclasses import dataclass
from typing import NotRequired, TypedDict


class UserInfo(TypedDict):
    """Response of GET /auth/me/."""
    id: int
    email: str


class AccountPayload(TypedDict):
    country_code: str
    currency: str
    annual_income: str
    monthly_investable_amount: str


class ExchangeRatePayload(TypedDict):
    base: str
    target: str
    rate: float
    last_updated: NotRequired[str]


class NewsItem(TypedDict):
    title: str
    description: str
    link: NotRequired[str | None]
    source: NotRequired[str | None]
    published_at: NotRequired[str | None]


@dataclass(frozen=True)
class Account:
    country_code: str
    currency: str
    annual_income: float
    monthly_investable_amount: float


@dataclass(frozen=True)
class MyExchangeRate:
    base: str
    target: str
    rate: float
    last_updated: str | None = None
