"""Repository for world map definitions."""
from __future__ import annotations

from typing import List

from soulstone.data.errors import DataReferenceError, DataValidationError, MapNotFoundError
from soulstone.data.repositories.base import RecordRepositoryBase
from soulstone.domain.defs import MapDef, MapPathDef, MapPinDef, PathStyle
from soulstone.domain.defs.map_def import PathVisibility, Point
from soulstone.domain.reveal import RevealRule

DEFAULT_MAP_SIZE: Point = (1024.0, 1024.0)


class MapsRepository(RecordRepositoryBase[MapDef]):
    """Loads and validates map layouts from maps/<map_id>.json."""

    not_found_error = MapNotFoundError

    def __init__(self, base_path=None) -> None:
        super().__init__("maps", base_path)

    def _build(self, record_id: str, raw: dict[str, object]) -> MapDef:
        context = f"map '{record_id}'"
        map_id = self._require_str(raw.get("mapId"), f"{context} mapId")
        if map_id != record_id:
            raise DataValidationError(f"{context} mapId must match file name (found '{map_id}').")
        size_value = raw.get("mapSize")
        size = DEFAULT_MAP_SIZE if size_value is None else self._parse_point(size_value, f"{context} mapSize")
        pins = self._parse_pins(raw.get("pins", []), context)
        pin_ids = {pin.location_id for pin in pins}
        paths = self._parse_paths(raw.get("paths", []), context, pin_ids)
        return MapDef(
            map_id=map_id,
            region_id=self._require_str(raw.get("regionId", ""), f"{context} regionId"),
            image_path=self._require_str(raw.get("mapImagePath", ""), f"{context} mapImagePath"),
            size=size,
            pins=tuple(pins),
            paths=tuple(paths),
        )

    def _parse_pins(self, value: object, context: str) -> List[MapPinDef]:
        pins: List[MapPinDef] = []
        seen: set[str] = set()
        for index, entry in enumerate(self._require_list(value, f"{context} pins")):
            ctx = f"{context} pins[{index}]"
            mapping = self._require_mapping(entry, ctx)
            location_id = self._require_str(mapping.get("locationId"), f"{ctx}.locationId")
            if location_id in seen:
                raise DataValidationError(f"{ctx}.locationId '{location_id}' has more than one pin.")
            seen.add(location_id)
            reveal = RevealRule(
                always_visible=self._require_bool(mapping.get("alwaysVisible", False), f"{ctx}.alwaysVisible"),
                reveal_flag=self._optional_str(mapping.get("revealFlag"), f"{ctx}.revealFlag") or None,
                reveal_quests=tuple(
                    self._require_str_list(mapping.get("revealQuests", []), f"{ctx}.revealQuests")
                ),
            )
            pins.append(
                MapPinDef(
                    location_id=location_id,
                    display_name=self._require_str(mapping.get("displayName", location_id), f"{ctx}.displayName"),
                    position=self._parse_point(mapping.get("position"), f"{ctx}.position"),
                    reveal=reveal,
                    icon_path=self._optional_str(mapping.get("iconSpritePath"), f"{ctx}.iconSpritePath") or None,
                    icon_color=self._require_str(mapping.get("iconColor", "#FFFFFF"), f"{ctx}.iconColor"),
                    icon_scale=self._require_number(mapping.get("iconScale", 1.0), f"{ctx}.iconScale"),
                )
            )
        return pins

    def _parse_paths(self, value: object, context: str, pin_ids: set[str]) -> List[MapPathDef]:
        paths: List[MapPathDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} paths")):
            ctx = f"{context} paths[{index}]"
            mapping = self._require_mapping(entry, ctx)
            from_id = self._require_str(mapping.get("fromLocationId"), f"{ctx}.fromLocationId")
            to_id = self._require_str(mapping.get("toLocationId"), f"{ctx}.toLocationId")
            for endpoint in (from_id, to_id):
                if endpoint not in pin_ids:
                    raise DataReferenceError(f"{ctx} references location '{endpoint}' with no pin.")
            raw_style = self._require_str(mapping.get("style", PathStyle.DOTTED.value), f"{ctx}.style")
            try:
                style = PathStyle(raw_style)
            except ValueError as exc:
                raise DataValidationError(f"{ctx}.style must be Solid, Dotted, Dashed or Hidden.") from exc
            waypoints = tuple(
                self._parse_point(point, f"{ctx}.waypoints[{point_index}]")
                for point_index, point in enumerate(self._require_list(mapping.get("waypoints", []), f"{ctx}.waypoints"))
            )
            paths.append(
                MapPathDef(
                    path_id=self._require_str(mapping.get("pathId", f"{from_id}_{to_id}"), f"{ctx}.pathId"),
                    from_location_id=from_id,
                    to_location_id=to_id,
                    visibility=self._parse_visibility(mapping, style, ctx),
                    style=style,
                    color=self._require_str(mapping.get("pathColor", "#8B4513"), f"{ctx}.pathColor"),
                    width=self._require_number(mapping.get("pathWidth", 2.0), f"{ctx}.pathWidth"),
                    waypoints=waypoints,
                )
            )
        return paths

    def _parse_visibility(self, mapping: dict[str, object], style: PathStyle, ctx: str) -> PathVisibility:
        when_both = self._require_bool(
            mapping.get("visibleWhenBothRevealed", True), f"{ctx}.visibleWhenBothRevealed"
        )
        when_one = self._require_bool(
            mapping.get("visibleWhenOneRevealed", False), f"{ctx}.visibleWhenOneRevealed"
        )
        if style is PathStyle.HIDDEN:
            return "never"
        if when_both:
            return "both_revealed"
        if when_one:
            return "either_revealed"
        return "never"

    def _parse_point(self, value: object, ctx: str) -> Point:
        if isinstance(value, dict):
            return (
                self._require_number(value.get("x"), f"{ctx}.x"),
                self._require_number(value.get("y"), f"{ctx}.y"),
            )
        if isinstance(value, list) and len(value) == 2:
            return (
                self._require_number(value[0], f"{ctx}[0]"),
                self._require_number(value[1], f"{ctx}[1]"),
            )
        raise DataValidationError(f"{ctx} must be an {{x, y}} object or an [x, y] pair.")
