"""World map visibility resolution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

from soulstone.data.repositories import MapsRepository
from soulstone.domain.defs import MapDef, MapPathDef, MapPinDef
from soulstone.domain.defs.map_def import Point
from soulstone.domain.flags import FlagStore
from soulstone.domain.reveal import is_revealed
from soulstone.domain.state import GameState


class ChapterGate(Protocol):
    def is_location_in_unlocked_chapter(self, location_id: str, flags: FlagStore) -> bool:
        ...


@dataclass(slots=True)
class MapPinView:
    location_id: str
    display_name: str
    position: Point
    icon_path: str | None
    icon_color: str
    icon_scale: float
    is_current: bool


@dataclass(slots=True)
class MapPathView:
    path_id: str
    from_location_id: str
    to_location_id: str
    style: str
    color: str
    width: float
    points: List[Point]


@dataclass(slots=True)
class MapView:
    map_id: str
    region_id: str
    image_path: str
    size: Point
    pins: List[MapPinView]
    paths: List[MapPathView]
    current_location_id: str | None


class MapService:
    """Derives pin and path visibility from flags; never mutates state."""

    def __init__(self, *, maps_repo: MapsRepository, chapter_gate: ChapterGate | None = None) -> None:
        self._maps_repo = maps_repo
        self._chapter_gate = chapter_gate

    def get_map(self, map_id: str) -> MapDef:
        return self._maps_repo.get(map_id)

    def is_pin_visible(self, pin: MapPinDef, flags: FlagStore) -> bool:
        if not is_revealed(pin.reveal, pin.location_id, flags):
            return False
        if self._chapter_gate is None:
            return True
        return self._chapter_gate.is_location_in_unlocked_chapter(pin.location_id, flags)

    @staticmethod
    def is_path_visible(path: MapPathDef, from_visible: bool, to_visible: bool) -> bool:
        if path.visibility == "both_revealed":
            return from_visible and to_visible
        if path.visibility == "either_revealed":
            return from_visible or to_visible
        return False

    def is_location_visible(self, map_def: MapDef, location_id: str, flags: FlagStore) -> bool:
        pin = map_def.get_pin(location_id)
        return pin is not None and self.is_pin_visible(pin, flags)

    def build_map_view(self, state: GameState, map_id: str) -> MapView:
        map_def = self._maps_repo.get(map_id)
        visible = {pin.location_id: self.is_pin_visible(pin, state.flags) for pin in map_def.pins}
        current_id = state.current_room_id
        pins = [
            MapPinView(
                location_id=pin.location_id,
                display_name=pin.display_name,
                position=pin.position,
                icon_path=pin.icon_path,
                icon_color=pin.icon_color,
                icon_scale=pin.icon_scale,
                is_current=pin.location_id == current_id,
            )
            for pin in map_def.pins
            if visible[pin.location_id]
        ]
        paths: List[MapPathView] = []
        for path in map_def.paths:
            if not self.is_path_visible(path, visible[path.from_location_id], visible[path.to_location_id]):
                continue
            start = map_def.get_pin(path.from_location_id)
            end = map_def.get_pin(path.to_location_id)
            assert start is not None and end is not None
            paths.append(
                MapPathView(
                    path_id=path.path_id,
                    from_location_id=path.from_location_id,
                    to_location_id=path.to_location_id,
                    style=path.style.value,
                    color=path.color,
                    width=path.width,
                    points=[start.position, *path.waypoints, end.position],
                )
            )
        return MapView(
            map_id=map_def.map_id,
            region_id=map_def.region_id,
            image_path=map_def.image_path,
            size=map_def.size,
            pins=pins,
            paths=paths,
            current_location_id=current_id if current_id in visible and visible[current_id] else None,
        )
