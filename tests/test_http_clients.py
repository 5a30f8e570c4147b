"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from calorie_tracker.adapters.fdc_client import HttpxFdcClient


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFdcClient(
        api_key="key",
        http_client=async_client,
        base_url="https://api.test",
    )

    search = asyncio.run(client.search_foods("rice", page_size=25))
    food = asyncio.run(client.get_food(1))

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    assert seen[0].url.params["api_key"] == "key"
    assert json.loads(seen[0].content.decode()) == {"query": "rice", "pageSize": 25}
    assert seen[1].url.path == "/food/1"


def test_fdc_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "bad key"})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(api_key="bad", http_client=async_client)

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        asyncio.run(client.search_foods("rice"))

    assert excinfo.value.response.status_code == 403


def test_fdc_client_create_normalizes_key_and_url() -> None:
    client = HttpxFdcClient.create(" key \n", base_url="https://api.test/fdc/v1/")
    try:
        assert client.api_key == "key"
        assert client.base_url == "https://api.test/fdc/v1"
    finally:
        asyncio.run(client.close())


def test_fdc_client_search_strips_query() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content.decode()))
        return httpx.Response(200, json={"foods": []})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(api_key="key", http_client=async_client)

    asyncio.run(client.search_foods("  oat milk  "))

    assert bodies == [{"query": "oat milk", "pageSize": 25}]
