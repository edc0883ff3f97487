"""Business news feed."""

from core.api_client import ApiClient
from models.account import NewsItem


async def get_business_news(client: ApiClient) -> list[NewsItem]:
    data = await client.get_json("/news/business-news/")
    return list((data or {}).get("news") or [])
