"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import (
    BodyMetricsRequest,
    DayResponse,
    EntryCreate,
    EntryResponse,
    EntryUpdate,
    FoodEntryCreate,
    FoodResponse,
    GoalResponse,
    GoalUpdate,
    RecommendationResponse,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import (
    InputValidationError,
    LookupUnavailableError,
    PersistenceError,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.persistence_sync.hydrate()
        except PersistenceError:
            logger.warning("Starting without stored calorie data")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InputValidationError)
    async def handle_validation(
        _request: Request, exc: InputValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.reason},
        )

    @app.exception_handler(LookupUnavailableError)
    async def handle_lookup(
        _request: Request, exc: LookupUnavailableError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.reason},
        )

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Health check with the persistence sync state."""
        sync = request.app.state.container.persistence_sync
        return {
            "status": "ok",
            "sync": sync.state.value,
            "save_failed": sync.last_save_error is not None,
        }

    @app.post("/calories/hydrate")
    async def hydrate(request: Request) -> dict[str, str]:
        """Retry loading stored calorie data."""
        sync = request.app.state.container.persistence_sync
        try:
            await sync.hydrate()
        except PersistenceError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return {"sync": sync.state.value}

    @app.get("/calories/today")
    async def today_overview(request: Request, q: str | None = None) -> DayResponse:
        container: AppContainer = request.app.state.container
        overview = container.calories_service.day_overview(query=q)
        return DayResponse.from_overview(overview)

    @app.get("/calories/days/{day}")
    async def day_overview(
        day: date, request: Request, q: str | None = None
    ) -> DayResponse:
        """Return totals and entries for a local calendar day."""
        container: AppContainer = request.app.state.container
        overview = container.calories_service.day_overview(day, query=q)
        return DayResponse.from_overview(overview)

    @app.post("/calories/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(payload: EntryCreate, request: Request) -> EntryResponse:
        container: AppContainer = request.app.state.container
        entry = container.calories_service.add_entry(
            name=payload.name,
            calories=payload.calories,
            entry_type=payload.type,
            note=payload.note,
            day=payload.day,
        )
        await container.persistence_sync.flush()
        return EntryResponse.from_entry(entry)

    @app.put("/calories/entries/{entry_id}")
    async def update_entry(
        entry_id: UUID, payload: EntryUpdate, request: Request
    ) -> EntryResponse:
        container: AppContainer = request.app.state.container
        if container.calories_service.get_entry(entry_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        entry = container.calories_service.update_entry(
            entry_id,
            name=payload.name,
            calories=payload.calories,
            entry_type=payload.type,
            note=payload.note,
            recorded_at=payload.recorded_at,
        )
        await container.persistence_sync.flush()
        return EntryResponse.from_entry(entry)

    @app.delete("/calories/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entry_id: UUID, request: Request) -> None:
        container: AppContainer = request.app.state.container
        container.calories_service.remove_entry(entry_id)
        await container.persistence_sync.flush()

    @app.get("/calories/goal")
    async def get_goal(request: Request) -> GoalResponse:
        container: AppContainer = request.app.state.container
        return GoalResponse(goal=container.store.state.daily_goal)

    @app.put("/calories/goal")
    async def set_goal(payload: GoalUpdate, request: Request) -> GoalResponse:
        container: AppContainer = request.app.state.container
        goal = container.calories_service.set_goal(payload.goal)
        await container.persistence_sync.flush()
        return GoalResponse(goal=goal)

    @app.post("/calories/goal/recommendation")
    async def recommend_goal(
        payload: BodyMetricsRequest, request: Request
    ) -> RecommendationResponse:
        """Estimate a daily goal without changing the stored one."""
        container: AppContainer = request.app.state.container
        recommendation = container.calories_service.recommend_goal(payload.to_metrics())
        return RecommendationResponse.from_recommendation(recommendation)

    @app.post("/calories/goal/apply")
    async def apply_goal(payload: BodyMetricsRequest, request: Request) -> GoalResponse:
        """Estimate a daily goal and make it the current one."""
        container: AppContainer = request.app.state.container
        service = container.calories_service
        goal = service.apply_goal(service.recommend_goal(payload.to_metrics()))
        await container.persistence_sync.flush()
        return GoalResponse(goal=goal)

    @app.get("/foods/search")
    async def search_foods(q: str, request: Request) -> dict[str, list[FoodResponse]]:
        container: AppContainer = request.app.state.container
        candidates = await container.calories_service.search_foods(q)
        return {"foods": [FoodResponse.from_candidate(food) for food in candidates]}

    @app.post("/foods/{fdc_id}/entries", status_code=status.HTTP_201_CREATED)
    async def create_food_entry(
        fdc_id: int, payload: FoodEntryCreate, request: Request
    ) -> EntryResponse:
        """Log a consumed entry from a looked-up food."""
        container: AppContainer = request.app.state.container
        entry = await container.calories_service.add_food_entry(fdc_id, day=payload.day)
        await container.persistence_sync.flush()
        return EntryResponse.from_entry(entry)

    return app
