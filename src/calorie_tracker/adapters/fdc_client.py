"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_BASE_URL = "https://api.nal.usda.gov/fdc/v1"


class FdcClient(Protocol):
    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        """Return the raw search payload with a ``foods`` list."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Return the raw food details payload."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FDC client authenticated with an api_key query parameter.

    Non-2xx responses raise ``httpx.HTTPStatusError``; callers decide
    whether to retry.
    """

    api_key: str
    http_client: httpx.AsyncClient
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 15

    @classmethod
    def create(cls, api_key: str, base_url: str = DEFAULT_BASE_URL) -> "HttpxFdcClient":
        return cls(
            api_key=api_key.strip(),
            http_client=httpx.AsyncClient(),
            base_url=base_url.rstrip("/"),
        )

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        return await self._request(
            "POST",
            "/foods/search",
            json={"query": query.strip(), "pageSize": page_size},
        )

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return await self._request("GET", f"/food/{fdc_id}")

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params={"api_key": self.api_key},
            json=json,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
