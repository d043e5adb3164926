from __future__ import annotations

from dataclasses import dataclass, field

from backpacker.api.models import Location, MapFocus, MapMarker, MapPolyline, MapView

WORLD_FOCUS = MapFocus(latitude=20.0, longitude=0.0, zoom=2.5)


@dataclass(slots=True)
class MapOverlay:
    """Server-side record of what the map widget should show.

    The front end mirrors this with its own map library; we only track markers,
    connecting lines, and where the viewport should fly to.
    """

    markers: list[Location] = field(default_factory=list)
    polylines: list[tuple[Location, Location]] = field(default_factory=list)
    focus: MapFocus = field(default_factory=lambda: WORLD_FOCUS.model_copy())

    def add_marker(self, location: Location) -> None:
        self.markers.append(location)

    def draw_path(self, origin: Location, destination: Location) -> None:
        self.polylines.append((origin, destination))

    def fly_to(self, location: Location, *, zoom: float = 5) -> None:
        self.focus = MapFocus(latitude=location.latitude, longitude=location.longitude, zoom=zoom)

    def reset(self) -> None:
        self.markers.clear()
        self.polylines.clear()
        self.focus = WORLD_FOCUS.model_copy()

    def to_view(self) -> MapView:
        return MapView(
            markers=[MapMarker(latitude=m.latitude, longitude=m.longitude, label=m.label) for m in self.markers],
            polylines=[
                MapPolyline(points=[(a.latitude, a.longitude), (b.latitude, b.longitude)]) for a, b in self.polylines
            ],
            focus=self.focus,
        )
