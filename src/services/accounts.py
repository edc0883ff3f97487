"""
Account profile and exchange rate lookups.
"""

from core.api_client import ApiClient
from models.account import Account, AccountPayload, ExchangeRatePayload, MyExchangeRate


def map_account(payload: AccountPayload) -> Account:
    # Backend sends decimal amounts as strings
    return Account(
        country_code=payload["country_code"],
        currency=payload["currency"],
        annual_income=float(payload["annual_income"]),
        monthly_investable_amount=float(payload["monthly_investable_amount"]),
    )


def map_exchange_rate(payload: ExchangeRatePayload) -> MyExchangeRate:
    return MyExchangeRate(
        base=payload["base"],
        target=payload["target"],
        rate=float(payload["rate"]),
        last_updated=payload.get("last_updated"),
    )


async def get_my_account(client: ApiClient) -> Account:
    return map_account(await client.get_json("/accounts/me/"))


async def get_my_exchange_rate(client: ApiClient) -> MyExchangeRate:
    return map_exchange_rate(await client.get_json("/accounts/me/exchange-rate/"))
