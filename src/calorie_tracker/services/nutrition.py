"""Nutrition lookup service integrating USDA FDC."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.domain.errors import InputValidationError, LookupUnavailableError
from calorie_tracker.domain.nutrition import FoodCandidate
from calorie_tracker.services.cache import Cache

_ENERGY_NUTRIENT_NUMBER = "208"
_ENERGY_NUTRIENT_ID = 1008
_ENERGY_NAME = "energy"
_KCAL_UNITS = {"kcal", ""}

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Service for food lookups with caching and a short retry."""

    fdc_client: FdcClient
    cache: Cache
    page_size: int = 25
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str) -> list[FoodCandidate]:
        """Search FDC foods matching a free-text query."""
        cleaned = query.strip()
        if not cleaned:
            raise InputValidationError("Enter a food to search for.")
        cache_key = f"fdc:search:{cleaned.lower()}:{self.page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(cleaned, page_size=self.page_size),
            action="search",
        )
        foods = payload.get("foods") or []
        candidates = [_candidate_from_payload(food) for food in foods]
        self.cache.set(cache_key, candidates, ttl_seconds=self.search_ttl_seconds)
        _logger.info("Food search: query=%s results=%s", cleaned, len(candidates))
        return candidates

    async def get_food(self, fdc_id: int) -> FoodCandidate:
        """Fetch a single food by FDC id."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodCandidate):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        candidate = _candidate_from_payload(payload)
        self.cache.set(cache_key, candidate, ttl_seconds=self.food_ttl_seconds)
        return candidate

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call the FDC API, retrying once before reporting it unavailable."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "Food lookup %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise LookupUnavailableError(
                        "We were unable to fetch foods. Check your key and try again."
                    ) from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _candidate_from_payload(food: dict[str, object]) -> FoodCandidate:
    serving_size = food.get("servingSize")
    return FoodCandidate(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description") or ""),
        brand_name=food.get("brandName") or food.get("brandOwner"),
        serving_size=(
            float(serving_size) if isinstance(serving_size, int | float) else None
        ),
        serving_size_unit=food.get("servingSizeUnit"),
        energy_kcal=extract_energy_kcal(food.get("foodNutrients") or []),
    )


def extract_energy_kcal(food_nutrients: list[dict[str, object]]) -> float | None:
    """Return the caloric energy value from an FDC nutrient list.

    Search results carry flat ``nutrientNumber``/``value`` fields while food
    details nest them under ``nutrient`` with an ``amount``. The stable
    nutrient code wins; a nutrient literally named "energy" in kcal is the
    fallback.
    """
    fallback: float | None = None
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        number = str(info.get("number") or nutrient.get("nutrientNumber") or "")
        nutrient_id = info.get("id") or nutrient.get("nutrientId")
        name = str(info.get("name") or nutrient.get("nutrientName") or "")
        unit = str(info.get("unitName") or nutrient.get("unitName") or "")
        value = nutrient.get("value", nutrient.get("amount"))
        if not isinstance(value, int | float):
            continue
        if number == _ENERGY_NUTRIENT_NUMBER or nutrient_id == _ENERGY_NUTRIENT_ID:
            return float(value)
        if (
            fallback is None
            and name.lower() == _ENERGY_NAME
            and unit.lower() in _KCAL_UNITS
        ):
            fallback = float(value)
    return fallback
