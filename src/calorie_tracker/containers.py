"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.supabase_preference_repository import (
    SupabasePreferenceRepository,
)
from calorie_tracker.config import Settings, parse_api_key
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.calories import CaloriesService
from calorie_tracker.services.clock import Clock, SystemClock
from calorie_tracker.services.nutrition import NutritionService
from calorie_tracker.services.persistence import PersistenceSync
from calorie_tracker.services.store import CalorieStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    store: CalorieStore
    persistence_sync: PersistenceSync
    calories_service: CaloriesService
    nutrition_service: NutritionService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    repository = SupabasePreferenceRepository(
        supabase_client,
        table=resolved_settings.preferences_table,
        default_goal=resolved_settings.default_daily_goal,
    )
    clock = SystemClock(resolved_settings.timezone)
    store = CalorieStore(daily_goal=resolved_settings.default_daily_goal)
    persistence_sync = PersistenceSync(store, repository)

    fdc_client: HttpxFdcClient | None = None
    nutrition_service: NutritionService | None = None
    api_key = parse_api_key(resolved_settings.fdc_api_key)
    if api_key is not None:
        fdc_client = HttpxFdcClient.create(
            api_key=api_key, base_url=resolved_settings.fdc_base_url
        )
        nutrition_service = NutritionService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            page_size=resolved_settings.lookup_page_size,
        )

    calories_service = CaloriesService(
        store=store,
        clock=clock,
        nutrition_service=nutrition_service,
    )

    async def close_resources() -> None:
        await persistence_sync.flush()
        persistence_sync.close()
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        store=store,
        persistence_sync=persistence_sync,
        calories_service=calories_service,
        nutrition_service=nutrition_service,
        close_resources=close_resources,
    )
