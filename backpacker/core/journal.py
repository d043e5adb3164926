from __future__ import annotations

from pydantic import BaseModel, Field

from backpacker.api.models import JobRecord, Location
from backpacker.core.geo import round_half_up
from backpacker.core.rules import CIRCUMNAVIGATION_DEGREES


def normalize_longitude_delta(delta: float) -> float:
    """Fold a raw longitude difference into (-180, 180].

    A single +/-360 correction is enough because both longitudes are within [-180, 180].
    """

    if delta > 180:
        delta -= 360
    elif delta <= -180:
        delta += 360
    return delta


class Journal(BaseModel):
    """The player's travel log: money, where they have been, and how far around the globe they are.

    Mutate only through `update_money`, `update_location` and `record_job`.
    """

    current_money: int
    start_location: Location
    current_location: Location
    total_longitude_change: float = 0.0
    visited_locations: list[Location] = Field(default_factory=list)
    job_history: list[JobRecord] = Field(default_factory=list)

    @classmethod
    def start(cls, *, starting_money: int, start_location: Location) -> "Journal":
        return cls(
            current_money=starting_money,
            start_location=start_location,
            current_location=start_location,
            visited_locations=[start_location],
        )

    def update_money(self, amount: int) -> None:
        # No floor here; callers decide when the player is broke.
        self.current_money += amount

    def update_location(self, new_location: Location, old_location: Location) -> None:
        self.current_location = new_location
        self.total_longitude_change += normalize_longitude_delta(new_location.longitude - old_location.longitude)
        self.visited_locations.append(new_location)

    def record_job(self, record: JobRecord) -> None:
        self.job_history.append(record)

    def has_won(self) -> bool:
        is_at_start = self.current_location.city == self.start_location.city
        # Returning to the start lands on exactly 360 in theory; ignore float noise.
        has_circumnavigated = round(abs(self.total_longitude_change), 6) >= CIRCUMNAVIGATION_DEGREES
        return is_at_start and has_circumnavigated and len(self.visited_locations) > 1

    def progress_percent(self) -> float:
        return min(abs(self.total_longitude_change) / CIRCUMNAVIGATION_DEGREES * 100, 100.0)

    def progress_text(self) -> str:
        return f"{round_half_up(abs(self.total_longitude_change))}°/{int(CIRCUMNAVIGATION_DEGREES)}°"
