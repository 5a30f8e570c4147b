"""Nutrition lookup domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodCandidate:
    """A food returned by the nutrition lookup."""

    fdc_id: int
    description: str
    brand_name: str | None
    serving_size: float | None
    serving_size_unit: str | None
    energy_kcal: float | None

    @property
    def has_energy(self) -> bool:
        """True when the energy value rounds to at least one kcal."""
        return self.energy_kcal is not None and self.energy_kcal >= 0.5
