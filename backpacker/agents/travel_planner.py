from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from backpacker.agents.generator import ContentGenerator
from backpacker.agents.json_output import InvalidAIResponseError
from backpacker.api.models import Location, TravelOption
from backpacker.core.geo import great_circle_distance_km, transport_mode_for, travel_cost_for


def make_travel_option(origin: Location, destination: Location) -> TravelOption:
    distance = great_circle_distance_km(origin, destination)
    return TravelOption(
        **destination.model_dump(),
        cost=travel_cost_for(distance),
        mode=transport_mode_for(distance),
        distance_km=distance,
    )


@dataclass(slots=True)
class TravelPlanner:
    """Prices AI-suggested destinations from the player's current location.

    AI failures are not handled here; the game loop decides what to do.
    """

    generator: ContentGenerator

    async def get_travel_options(self, current_location: Location) -> list[TravelOption]:
        raw = await self.generator.generate_destinations(current_location)
        try:
            destinations = [Location.model_validate(d) for d in raw]
        except ValidationError as e:
            raise InvalidAIResponseError(f"Destination does not match schema: {e}") from e

        return [make_travel_option(current_location, dest) for dest in destinations]
