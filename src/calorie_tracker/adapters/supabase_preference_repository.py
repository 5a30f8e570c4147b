"""Supabase key-value repository for calorie preferences."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.calories import (
    DEFAULT_DAILY_GOAL,
    CalorieEntry,
    EntrySource,
    EntryType,
)
from calorie_tracker.services.persistence import PreferenceRepository

GOAL_KEY = "calorie_goal"
ENTRIES_KEY = "calorie_entries"


@dataclass
class SupabasePreferenceRepository(PreferenceRepository):
    """Stores the goal and entries as JSON values in a key-value table."""

    client: Client
    table: str = "preferences"
    default_goal: int = DEFAULT_DAILY_GOAL

    async def load_goal(self) -> int:
        value = await asyncio.to_thread(self._get_value, GOAL_KEY)
        if value is None:
            return self.default_goal
        return int(value)

    async def load_entries(self) -> list[CalorieEntry]:
        value = await asyncio.to_thread(self._get_value, ENTRIES_KEY)
        if not value:
            return []
        return [entry_from_record(record) for record in value]

    async def save_goal(self, goal: int) -> None:
        await asyncio.to_thread(self._set_value, GOAL_KEY, goal)

    async def save_entries(self, entries: Sequence[CalorieEntry]) -> None:
        payload = [entry_to_record(entry) for entry in entries]
        await asyncio.to_thread(self._set_value, ENTRIES_KEY, payload)

    def _get_value(self, key: str) -> object | None:
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def _set_value(self, key: str, value: object) -> None:
        self.client.table(self.table).upsert(
            {"key": key, "value": value}, on_conflict="key"
        ).execute()


def entry_to_record(entry: CalorieEntry) -> dict[str, object]:
    """Encode an entry as a JSON-compatible record."""
    record: dict[str, object] = {
        "id": str(entry.id),
        "name": entry.name,
        "calories": entry.calories,
        "type": entry.type.value,
        "source": entry.source.value,
        "recordedAtIso": entry.recorded_at.isoformat(),
    }
    if entry.note is not None:
        record["note"] = entry.note
    return record


def entry_from_record(record: dict[str, object]) -> CalorieEntry:
    """Decode a stored record; older records may use the ``usda`` source tag."""
    source = str(record.get("source") or EntrySource.MANUAL.value)
    if source == "usda":
        source = EntrySource.EXTERNAL_LOOKUP.value
    recorded_at = datetime.fromisoformat(str(record["recordedAtIso"]))
    if recorded_at.tzinfo is None:
        recorded_at = recorded_at.replace(tzinfo=UTC)
    return CalorieEntry(
        id=UUID(str(record["id"])),
        name=str(record["name"]),
        calories=int(record["calories"]),
        type=EntryType(str(record["type"])),
        recorded_at=recorded_at,
        source=EntrySource(source),
        note=record.get("note"),
    )
