"""World map definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Tuple

from soulstone.domain.reveal import RevealRule

Point = Tuple[float, float]
PathVisibility = Literal["both_revealed", "either_revealed", "never"]


class PathStyle(str, Enum):
    SOLID = "Solid"
    DOTTED = "Dotted"
    DASHED = "Dashed"
    HIDDEN = "Hidden"


@dataclass(slots=True)
class MapPinDef:
    location_id: str
    display_name: str
    position: Point
    reveal: RevealRule
    icon_path: str | None = None
    icon_color: str = "#FFFFFF"
    icon_scale: float = 1.0


@dataclass(slots=True)
class MapPathDef:
    path_id: str
    from_location_id: str
    to_location_id: str
    visibility: PathVisibility
    style: PathStyle = PathStyle.DOTTED
    color: str = "#8B4513"
    width: float = 2.0
    waypoints: Tuple[Point, ...] = ()


@dataclass(slots=True)
class MapDef:
    map_id: str
    region_id: str
    image_path: str
    size: Point
    pins: Tuple[MapPinDef, ...]
    paths: Tuple[MapPathDef, ...]

    def get_pin(self, location_id: str) -> MapPinDef | None:
        for pin in self.pins:
            if pin.location_id == location_id:
                return pin
        return None
