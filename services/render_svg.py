# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""SVG rendering of a tray cross-section with its cable bundles.

Power and MV bundles grow from the left margin, VFD and control bundles from
the right margin. Every packing strategy takes the current ``Cursor`` and
returns a new one; the canvas is the only thing mutated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from html import escape
from typing import Any, Mapping, Sequence

from models import CATEGORY_KEYS, CableLayout, CableModel, TrayModel
from services.classify import (
    BAND_30_1_40,
    BAND_40_1_45,
    BAND_45_1_60,
    build_cable_bundles,
    valid_diameter,
)
from services.layout import (
    CategorySettings,
    bundle_spacing_value,
    resolve_category_settings,
    split_into_bundles,
)

logger = logging.getLogger(__name__)

CANVAS_MARGIN = 50
TEXT_PADDING = 40
C_PROFILE_HEIGHT_MM = 15
DEFAULT_SPACING_MM = 15.0
DEFAULT_CABLE_DIAMETER_MM = 1.0
PLACEHOLDER_WIDTH = 600
PLACEHOLDER_HEIGHT = 300
PLACEHOLDER_MESSAGE = "Provide tray width and height to render the concept."

TRAY_PURPOSE_TYPE_B = "type b"
TRAY_PURPOSE_TYPE_BC = "type bc"

POWER_HEX_BANDS = {BAND_40_1_45, BAND_45_1_60}
VFD_GROUPED_BANDS = {BAND_30_1_40, BAND_40_1_45}

NORMAL = "normal"
TREFOIL = "trefoil"

SQRT3_HALF = math.sqrt(3) / 2


class TrayDrawingError(Exception):
    """Raised when the drawing is requested without a canvas or a tray."""


def _num(value: float) -> str:
    return f"{round(value, 2):g}"


class SvgCanvas:
    """Canvas-like drawing surface that records shapes and serialises to SVG."""

    def __init__(self, width: float = 0, height: float = 0):
        self.width = width
        self.height = height
        self.shapes: list[dict[str, Any]] = []

    def resize(self, width: float, height: float) -> None:
        # resizing clears the surface, like an HTML canvas
        self.width = width
        self.height = height
        self.shapes = []

    def fill_rect(self, x: float, y: float, width: float, height: float, fill: str) -> None:
        self.shapes.append(
            {"kind": "rect", "x": x, "y": y, "width": width, "height": height, "fill": fill}
        )

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, stroke: str = "#000000"
    ) -> None:
        self.shapes.append(
            {"kind": "rect", "x": x, "y": y, "width": width, "height": height, "stroke": stroke}
        )

    def circle(self, cx: float, cy: float, r: float, stroke: str = "#000000") -> None:
        self.shapes.append({"kind": "circle", "cx": cx, "cy": cy, "r": r, "stroke": stroke})

    def line(
        self, x1: float, y1: float, x2: float, y2: float, stroke: str = "#000000", width: float = 1
    ) -> None:
        self.shapes.append(
            {"kind": "line", "x1": x1, "y1": y1, "x2": x2, "y2": y2, "stroke": stroke, "width": width}
        )

    def text(
        self,
        x: float,
        y: float,
        label: str,
        font_size: int = 20,
        fill: str = "#000000",
        rotate: float | None = None,
    ) -> None:
        self.shapes.append(
            {
                "kind": "text",
                "x": x,
                "y": y,
                "label": label,
                "font_size": font_size,
                "fill": fill,
                "rotate": rotate,
            }
        )

    def shapes_of(self, kind: str) -> list[dict[str, Any]]:
        return [shape for shape in self.shapes if shape["kind"] == kind]

    def to_svg(self) -> str:
        parts: list[str] = []
        for s in self.shapes:
            if s["kind"] == "rect":
                fill = s.get("fill") or "none"
                stroke = f' stroke="{s["stroke"]}"' if s.get("stroke") else ""
                parts.append(
                    f'<rect x="{_num(s["x"])}" y="{_num(s["y"])}" width="{_num(s["width"])}" height="{_num(s["height"])}" fill="{fill}"{stroke}/>'
                )
            elif s["kind"] == "circle":
                parts.append(
                    f'<circle cx="{_num(s["cx"])}" cy="{_num(s["cy"])}" r="{_num(s["r"])}" fill="none" stroke="{s["stroke"]}" stroke-width="1"/>'
                )
            elif s["kind"] == "line":
                parts.append(
                    f'<line x1="{_num(s["x1"])}" y1="{_num(s["y1"])}" x2="{_num(s["x2"])}" y2="{_num(s["y2"])}" stroke="{s["stroke"]}" stroke-width="{_num(s["width"])}"/>'
                )
            elif s["kind"] == "text":
                transform = (
                    f' transform="rotate({_num(s["rotate"])} {_num(s["x"])} {_num(s["y"])})"'
                    if s["rotate"]
                    else ""
                )
                parts.append(
                    f'<text x="{_num(s["x"])}" y="{_num(s["y"])}" font-size="{s["font_size"]}" font-family="Arial" fill="{s["fill"]}" text-anchor="middle" dominant-baseline="middle"{transform}>{escape(s["label"])}</text>'
                )
        return f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(self.width)}" height="{_num(self.height)}">{"".join(parts)}</svg>'


def cable_diameter(cable: CableModel) -> float:
    diameter = valid_diameter(cable.diameter_mm)
    return diameter if diameter is not None else DEFAULT_CABLE_DIAMETER_MM


@dataclass(frozen=True)
class Cursor:
    """Drawing position plus the cables resting on the tray floor on each side."""

    left_x: float
    right_x: float
    power_row: tuple[CableModel, ...] = ()
    vfd_row: tuple[CableModel, ...] = ()
    control_row: tuple[CableModel, ...] = ()

    def advance_left(self, dx: float) -> "Cursor":
        return replace(self, left_x=self.left_x + dx)

    def advance_right(self, dx: float) -> "Cursor":
        return replace(self, right_x=self.right_x - dx)


@dataclass(frozen=True)
class _Frame:
    canvas: SvgCanvas
    tray: TrayModel
    cables_on_tray: Sequence[CableModel]
    scale: float
    spacing_mm: float
    settings: Mapping[str, CategorySettings] = field(default_factory=dict)

    @property
    def width_mm(self) -> float:
        return float(self.tray.width_mm or 0)

    @property
    def height_mm(self) -> float:
        return float(self.tray.height_mm or 0)

    @property
    def spacing_px(self) -> float:
        return self.spacing_mm * self.scale

    @property
    def base_bottom_y(self) -> float:
        return CANVAS_MARGIN + (self.height_mm - C_PROFILE_HEIGHT_MM) * self.scale

    def row_width_px(self, cables: Sequence[CableModel]) -> float:
        return sum((cable_diameter(c) + self.spacing_mm) * self.scale for c in cables)

    def right_edge(self, cursor: Cursor) -> float:
        occupied = self.row_width_px(cursor.vfd_row + cursor.control_row)
        return CANVAS_MARGIN + self.width_mm * self.scale - self.spacing_px - occupied

    def lift_px(self, diameter_mm: float) -> float:
        radius_px = diameter_mm * self.scale / 2
        return radius_px * SQRT3_HALF + radius_px - self.spacing_px * 2


@dataclass(frozen=True)
class TrefoilGeometry:
    # (cable, left offset px, bottom offset px); bottom offset 0 is the tray floor
    positions: tuple[tuple[CableModel, float, float], ...]
    width: float


def _cable_label(frame: _Frame, cable: CableModel) -> str:
    for index, candidate in enumerate(frame.cables_on_tray):
        if candidate is cable:
            return str(index + 1)
    return "?"


def _draw_circle(frame: _Frame, cable: CableModel, cx: float, cy: float) -> None:
    radius = cable_diameter(cable) / 2 * frame.scale
    frame.canvas.circle(cx, cy, radius)
    frame.canvas.text(cx, cy, _cable_label(frame, cable), font_size=20)


def _draw_cable(frame: _Frame, cable: CableModel, x: float, bottom_y: float) -> None:
    radius = cable_diameter(cable) / 2 * frame.scale
    _draw_circle(frame, cable, x + radius, bottom_y - radius)


def _draw_cable_from_right(frame: _Frame, cable: CableModel, x: float, bottom_y: float) -> None:
    radius = cable_diameter(cable) / 2 * frame.scale
    _draw_circle(frame, cable, x - radius, bottom_y - radius)


def _sorted_desc(cables: Sequence[CableModel]) -> list[CableModel]:
    return sorted(cables, key=cable_diameter, reverse=True)


def _sorted_bands(bands: Mapping[str, Sequence[CableModel]]) -> list[tuple[str, list[CableModel]]]:
    entries = [(band, list(cables)) for band, cables in bands.items() if cables]
    entries.sort(key=lambda entry: max(cable_diameter(c) for c in entry[1]), reverse=True)
    return entries


def apply_phase_rotation(cables: Sequence[CableModel]) -> list[CableModel]:
    """Reorder blocks of six cables into the cyclic L1/L2/L3 arrangement."""
    block_size = 6
    half = block_size // 2
    rotated: list[CableModel] = []
    for start in range(0, len(cables), block_size):
        block = list(cables[start : start + block_size])
        rotated.extend(block[1:half] + block[0:1])
        rotated.extend(reversed(block[half:]))
    return rotated if rotated else list(cables)


def calculate_rows_and_columns(
    tray_height_mm: float,
    bundle: Sequence[CableModel],
    category: str,
    settings: CategorySettings,
) -> tuple[int, int]:
    usable_height = max(tray_height_mm - C_PROFILE_HEIGHT_MM, 1)
    max_diameter = max([DEFAULT_CABLE_DIAMETER_MM] + [cable_diameter(c) for c in bundle])

    if max_diameter <= 0 or not bundle:
        logger.debug("rows/columns fallback for %s: no cables", category)
        return 1, len(bundle)
    if len(bundle) == 2:
        return 1, 2

    max_rows = max(settings.max_rows, 1)
    max_columns = max(settings.max_columns, 1)
    physical_max_rows = max(math.floor(usable_height / max_diameter), 1)
    rows = max(min(physical_max_rows, max_rows), 1)
    columns = max(math.ceil(len(bundle) / rows), 1)

    if columns > max_columns:
        columns = max_columns
        rows = math.ceil(len(bundle) / columns)
    rows = max(1, min(rows, max_rows))
    columns = max(1, min(columns, max_columns))

    logger.debug(
        "rows/columns for %s: height=%s max_d=%s cables=%d physical_rows=%d -> %dx%d",
        category,
        tray_height_mm,
        max_diameter,
        len(bundle),
        physical_max_rows,
        rows,
        columns,
    )
    return rows, columns


def split_trefoil_groups(
    cables: Sequence[CableModel], enabled: bool
) -> list[tuple[str, list[CableModel]]]:
    """Cluster cables sharing from/to locations into threes, keeping input order."""
    if not enabled or len(cables) < 3:
        return [(NORMAL, list(cables))] if cables else []

    by_route: dict[str, list[int]] = {}
    for index, cable in enumerate(cables):
        origin = (cable.from_location or "").strip()
        destination = (cable.to_location or "").strip()
        if not origin or not destination:
            continue
        by_route.setdefault(f"{origin}|{destination}", []).append(index)

    clusters: dict[int, list[CableModel]] = {}
    skipped: set[int] = set()
    for indices in by_route.values():
        for i in range(0, len(indices) - 2, 3):
            chunk = indices[i : i + 3]
            clusters[chunk[0]] = [cables[j] for j in chunk]
            skipped.update(chunk[1:])

    groups: list[tuple[str, list[CableModel]]] = []
    buffer: list[CableModel] = []
    for index, cable in enumerate(cables):
        if index in skipped:
            continue
        if index in clusters:
            if buffer:
                groups.append((NORMAL, buffer))
                buffer = []
            groups.append((TREFOIL, clusters[index]))
            continue
        buffer.append(cable)
    if buffer:
        groups.append((NORMAL, buffer))
    return groups


def trefoil_geometry(cables: Sequence[CableModel], scale: float) -> TrefoilGeometry | None:
    """Two cables on the floor touching each other, the third resting on both."""
    if len(cables) != 3:
        return None
    c1, c2, c3 = cables
    r1, r2, r3 = (cable_diameter(c) * scale / 2 for c in cables)
    if not all(math.isfinite(r) for r in (r1, r2, r3)):
        return None

    x1, y1 = r1, -r1
    x2, y2 = x1 + r1 + r2, -r2
    dx, dy = x2 - x1, y2 - y1
    d = math.hypot(dx, dy)
    if d < 1e-6:
        return None

    reach1, reach2 = r1 + r3, r2 + r3
    if d > reach1 + reach2 or d < abs(reach1 - reach2):
        return None
    a = (reach1 * reach1 - reach2 * reach2 + d * d) / (2 * d)
    h_squared = reach1 * reach1 - a * a
    if h_squared < 0:
        return None
    h = math.sqrt(h_squared)

    px, py = x1 + dx * a / d, y1 + dy * a / d
    rx, ry = -dy * (h / d), dx * (h / d)
    first, second = (px + rx, py + ry), (px - rx, py - ry)
    top = first if first[1] < second[1] else second

    lefts = [0.0, x2 - r2, top[0] - r3]
    shift = min(lefts)
    lefts = [left - shift for left in lefts]
    positions = (
        (c1, lefts[0], 0.0),
        (c2, lefts[1], 0.0),
        (c3, lefts[2], top[1] + r3),
    )
    width = max(lefts[0] + 2 * r1, lefts[1] + 2 * r2, lefts[2] + 2 * r3)
    return TrefoilGeometry(positions=positions, width=width)


def _draw_trefoil(
    frame: _Frame, geometry: TrefoilGeometry, start_x: float
) -> tuple[float, tuple[CableModel, ...]]:
    floor: list[CableModel] = []
    for cable, left, bottom_offset in geometry.positions:
        _draw_cable(frame, cable, start_x + left, frame.base_bottom_y + bottom_offset)
        if abs(bottom_offset) < 0.5:
            floor.append(cable)
    return start_x + geometry.width, tuple(floor)


def _stack_from_left(
    frame: _Frame, cables: Sequence[CableModel], cursor: Cursor, rows: int
) -> Cursor:
    x = cursor.left_x
    floor: list[CableModel] = []
    for column in split_into_bundles(cables, max(rows, 1)):
        floor.append(column[0])
        y = frame.base_bottom_y
        for cable in column:
            _draw_cable(frame, cable, x, y)
            y -= cable_diameter(cable) * frame.scale + frame.spacing_px
        x += (max(cable_diameter(c) for c in column) + frame.spacing_mm) * frame.scale
    return replace(cursor, left_x=x, power_row=cursor.power_row + tuple(floor))


def _stack_from_right(
    frame: _Frame, cables: Sequence[CableModel], cursor: Cursor, rows: int
) -> Cursor:
    x = cursor.right_x
    floor: list[CableModel] = []
    for column in split_into_bundles(cables, max(rows, 1)):
        floor.append(column[0])
        y = frame.base_bottom_y
        for cable in column:
            _draw_cable_from_right(frame, cable, x, y)
            y -= cable_diameter(cable) * frame.scale + frame.spacing_px
        x -= (max(cable_diameter(c) for c in column) + frame.spacing_mm) * frame.scale
    return replace(cursor, right_x=x, control_row=cursor.control_row + tuple(floor))


def _hexagonal_packing(frame: _Frame, cables: Sequence[CableModel], cursor: Cursor) -> Cursor:
    """Every other cable after the first pair sits in the groove above the floor row.

    Positions are measured from the group's starting cursor so gaps laid down
    before the group are kept.
    """
    usable_height = frame.height_mm - C_PROFILE_HEIGHT_MM
    origin = cursor.left_x
    floor: list[CableModel] = []
    x = origin
    for index, cable in enumerate(cables):
        diameter = cable_diameter(cable)
        y = frame.base_bottom_y
        lifted = index != 0 and index % 2 == 0 and diameter <= 45 and usable_height > 45
        if lifted:
            y -= frame.lift_px(diameter)
            x = (
                origin
                + frame.row_width_px(floor)
                - (diameter * frame.scale + frame.spacing_px) * 1.5
            )
        _draw_cable(frame, cable, x, y)
        if not lifted:
            floor.append(cable)
        x = origin + frame.row_width_px(floor)
    return replace(cursor, left_x=x, power_row=cursor.power_row + tuple(floor))


def _draw_power_bundles(
    frame: _Frame, bands: Mapping[str, Sequence[CableModel]], cursor: Cursor
) -> Cursor:
    settings = frame.settings["power"]
    ordered = _sorted_bands(bands)
    for band_index, (band, band_cables) in enumerate(ordered):
        cables = _sorted_desc(band_cables)
        gap_px = (
            bundle_spacing_value(
                settings.bundle_spacing, cable_diameter(cables[0]), frame.spacing_mm
            )
            * frame.scale
        )
        sub_bundles = split_into_bundles(cables, settings.capacity)
        for sub_index, sub_bundle in enumerate(sub_bundles):
            groups = split_trefoil_groups(sub_bundle, settings.trefoil)
            for group_index, (kind, group) in enumerate(groups):
                geometry = trefoil_geometry(group, frame.scale) if kind == TREFOIL else None
                if geometry is not None:
                    end_x, floor = _draw_trefoil(frame, geometry, cursor.left_x)
                    cursor = replace(cursor, left_x=end_x, power_row=cursor.power_row + floor)
                elif kind == NORMAL and band in POWER_HEX_BANDS:
                    cursor = _hexagonal_packing(frame, group, cursor)
                else:
                    rows, _ = calculate_rows_and_columns(frame.height_mm, group, "power", settings)
                    cursor = _stack_from_left(frame, group, cursor, rows)
                if group_index < len(groups) - 1:
                    cursor = cursor.advance_left(gap_px)
            if sub_index < len(sub_bundles) - 1:
                cursor = cursor.advance_left(gap_px)
        if band_index < len(ordered) - 1:
            cursor = cursor.advance_left(gap_px)
    return cursor


def _draw_mv_bundles(
    frame: _Frame, bands: Mapping[str, Sequence[CableModel]], cursor: Cursor
) -> Cursor:
    power_row = list(cursor.power_row)
    x = cursor.left_x
    for _, band_cables in _sorted_bands(bands):
        rotated = apply_phase_rotation(_sorted_desc(band_cables))
        on_top = False
        lift_index = 2
        x_bottom = x
        x_top = x + (cable_diameter(rotated[0]) / 2 + 0.5) * frame.scale
        for index, cable in enumerate(rotated):
            diameter = cable_diameter(cable)
            y = frame.base_bottom_y
            if index == lift_index:
                y -= frame.lift_px(diameter)
                x = x_top
                on_top = True
                lift_index += 3
            _draw_cable(frame, cable, x, y)
            step = (diameter + frame.spacing_mm) * frame.scale
            if not on_top:
                power_row.append(cable)
                x += step
                x_bottom = x
            else:
                on_top = False
                x_bottom += step * 2
                x = x_bottom
                x_top += step * 4
    return replace(cursor, left_x=x, power_row=tuple(power_row))


def _draw_grouped_vfd(
    frame: _Frame, cables: Sequence[CableModel], cursor: Cursor, last_band: bool
) -> Cursor:
    by_destination: dict[str, list[CableModel]] = {}
    for cable in cables:
        key = (cable.to_location or "").strip() or "unknown"
        by_destination.setdefault(key, []).append(cable)

    vfd_row = list(cursor.vfd_row)
    x = cursor.right_x
    for group in by_destination.values():
        ordered = _sorted_desc(group)
        x_top = x - (cable_diameter(ordered[0]) / 2 + 0.5) * frame.scale
        for index, cable in enumerate(ordered):
            diameter = cable_diameter(cable)
            y = frame.base_bottom_y
            lifted = index == 2 and diameter <= 45
            if lifted:
                y -= frame.lift_px(diameter)
                x = x_top
            _draw_cable_from_right(frame, cable, x, y)
            if lifted:
                x -= diameter * frame.scale * 3.5
            else:
                vfd_row.append(cable)
                x -= (diameter + frame.spacing_mm) * frame.scale
        if not last_band:
            vfd_row.extend((ordered[0], ordered[0]))
    return replace(cursor, right_x=x, vfd_row=tuple(vfd_row))


def _draw_standard_vfd(
    frame: _Frame, cables: Sequence[CableModel], cursor: Cursor, rows: int, last_band: bool
) -> Cursor:
    ordered = _sorted_desc(cables)
    target_rows = max(rows, 1)
    vfd_row = list(cursor.vfd_row)
    x = cursor.right_x
    y = frame.base_bottom_y
    row = 0
    for cable in ordered:
        diameter = cable_diameter(cable)
        _draw_cable_from_right(frame, cable, x, y)
        y -= diameter * frame.scale + frame.spacing_px
        if row == 0:
            vfd_row.append(cable)
        row += 1
        if row == target_rows:
            row = 0
            x -= diameter * frame.scale + frame.spacing_px
            y = frame.base_bottom_y
    if not last_band and ordered:
        vfd_row.extend((ordered[0], ordered[0]))
    return replace(cursor, right_x=x, vfd_row=tuple(vfd_row))


def _draw_vfd_bundles(
    frame: _Frame, bands: Mapping[str, Sequence[CableModel]], cursor: Cursor
) -> Cursor:
    settings = frame.settings["vfd"]
    ordered = _sorted_bands(bands)
    for band_index, (band, band_cables) in enumerate(ordered):
        last_band = band_index == len(ordered) - 1
        cables = _sorted_desc(band_cables)
        gap_px = (
            bundle_spacing_value(
                settings.bundle_spacing, cable_diameter(cables[0]), frame.spacing_mm
            )
            * frame.scale
        )
        sub_bundles = split_into_bundles(cables, settings.capacity)
        for sub_index, sub_bundle in enumerate(sub_bundles):
            groups = split_trefoil_groups(sub_bundle, settings.trefoil)
            for group_index, (kind, group) in enumerate(groups):
                geometry = trefoil_geometry(group, frame.scale) if kind == TREFOIL else None
                if geometry is not None:
                    start_x = cursor.right_x - geometry.width
                    _, floor = _draw_trefoil(frame, geometry, start_x)
                    cursor = replace(cursor, right_x=start_x, vfd_row=cursor.vfd_row + floor)
                elif kind == NORMAL and band in VFD_GROUPED_BANDS:
                    cursor = _draw_grouped_vfd(frame, group, cursor, last_band)
                else:
                    rows, _ = calculate_rows_and_columns(frame.height_mm, group, "vfd", settings)
                    cursor = _draw_standard_vfd(frame, group, cursor, rows, last_band)
                if group_index < len(groups) - 1:
                    cursor = cursor.advance_right(gap_px)
            if sub_index < len(sub_bundles) - 1:
                cursor = cursor.advance_right(gap_px)
        if not last_band:
            cursor = cursor.advance_right(gap_px)
    return replace(cursor, right_x=frame.right_edge(cursor))


def _draw_control_bundles(
    frame: _Frame, bands: Mapping[str, Sequence[CableModel]], cursor: Cursor
) -> Cursor:
    settings = frame.settings["control"]
    ordered = _sorted_bands(bands)
    for band_index, (_, band_cables) in enumerate(ordered):
        cables = _sorted_desc(band_cables)
        gap_px = (
            bundle_spacing_value(
                settings.bundle_spacing, cable_diameter(cables[0]), frame.spacing_mm
            )
            * frame.scale
        )
        sub_bundles = split_into_bundles(cables, settings.capacity)
        for sub_index, sub_bundle in enumerate(sub_bundles):
            rows, _ = calculate_rows_and_columns(frame.height_mm, sub_bundle, "control", settings)
            cursor = _stack_from_right(frame, sub_bundle, cursor, rows)
            if sub_index < len(sub_bundles) - 1:
                cursor = cursor.advance_right(gap_px)
        if band_index < len(ordered) - 1:
            # two phantom copies of the largest cable open the gap to the next band
            cursor = replace(cursor, control_row=cursor.control_row + (cables[0], cables[0]))
        cursor = replace(cursor, right_x=frame.right_edge(cursor))
    return cursor


CATEGORY_DRAWERS = {
    "power": _draw_power_bundles,
    "mv": _draw_mv_bundles,
    "vfd": _draw_vfd_bundles,
    "control": _draw_control_bundles,
}


def _draw_missing_dimensions(canvas: SvgCanvas) -> None:
    width = canvas.width or PLACEHOLDER_WIDTH
    height = canvas.height or PLACEHOLDER_HEIGHT
    canvas.resize(width, height)
    canvas.fill_rect(0, 0, width, height, "#ffffff")
    canvas.text(width / 2, height / 2, PLACEHOLDER_MESSAGE, font_size=16, fill="#201f1e")


def _draw_base_structure(frame: _Frame) -> None:
    canvas = frame.canvas
    width_px = frame.width_mm * frame.scale
    height_px = frame.height_mm * frame.scale
    c_profile_px = C_PROFILE_HEIGHT_MM * frame.scale

    canvas.resize(width_px + CANVAS_MARGIN * 2, height_px + CANVAS_MARGIN * 2)
    canvas.fill_rect(0, 0, canvas.width, canvas.height, "#ffffff")
    canvas.text(
        CANVAS_MARGIN + width_px / 2,
        30,
        f"Cables bundles laying concept for tray {frame.tray.name}",
        font_size=24,
    )
    canvas.text(
        TEXT_PADDING,
        CANVAS_MARGIN + height_px / 2,
        f"Useful tray height: {_num(frame.height_mm - C_PROFILE_HEIGHT_MM)} mm",
        font_size=24,
        rotate=90,
    )
    canvas.stroke_rect(CANVAS_MARGIN, CANVAS_MARGIN, width_px, height_px - c_profile_px)
    canvas.fill_rect(
        CANVAS_MARGIN, CANVAS_MARGIN + height_px - c_profile_px, width_px, c_profile_px, "#d3d3d3"
    )
    canvas.stroke_rect(
        CANVAS_MARGIN, CANVAS_MARGIN + height_px - c_profile_px, width_px, c_profile_px
    )
    canvas.text(
        CANVAS_MARGIN + width_px / 2,
        CANVAS_MARGIN + height_px + TEXT_PADDING,
        f"Useful tray width: {_num(frame.width_mm)} mm",
        font_size=24,
    )


def _draw_separator(
    frame: _Frame, left: Sequence[CableModel], right: Sequence[CableModel]
) -> None:
    left_mm = sum(cable_diameter(c) + frame.spacing_mm for c in left)
    right_mm = sum(cable_diameter(c) + frame.spacing_mm for c in right)
    free_mm = frame.width_mm - (left_mm + right_mm)
    x = (left_mm + free_mm / 2) * frame.scale + CANVAS_MARGIN
    top_y = CANVAS_MARGIN + C_PROFILE_HEIGHT_MM * frame.scale
    frame.canvas.line(x, frame.base_bottom_y, x, top_y, width=2)


def _draw_separators(frame: _Frame, cursor: Cursor) -> None:
    purpose = (frame.tray.purpose or "").strip().lower()
    if purpose == TRAY_PURPOSE_TYPE_B and cursor.power_row and cursor.vfd_row:
        _draw_separator(frame, cursor.power_row, cursor.vfd_row)
    elif purpose == TRAY_PURPOSE_TYPE_BC and cursor.power_row and cursor.control_row:
        _draw_separator(frame, cursor.power_row, cursor.control_row)


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def draw_tray_layout(
    canvas: SvgCanvas | None,
    tray: TrayModel | None,
    cables_on_tray: Sequence[CableModel],
    cable_bundles: Mapping[str, Mapping[str, Sequence[CableModel]]] | None,
    scale: float,
    spacing_mm: float | None = None,
    layout: CableLayout | None = None,
) -> None:
    """Draw the tray cross-section and its bundles onto ``canvas``.

    A tray without width or height gets a placeholder message instead.
    """
    if canvas is None:
        raise TrayDrawingError("Canvas cannot be None")
    if tray is None:
        raise TrayDrawingError("Tray cannot be None")

    if not _positive(tray.width_mm) or not _positive(tray.height_mm):
        _draw_missing_dimensions(canvas)
        return
    if not _positive(scale):
        raise TrayDrawingError(f"Canvas scale must be positive, got {scale!r}")

    effective_spacing = spacing_mm if _positive(spacing_mm) or spacing_mm == 0 else None
    frame = _Frame(
        canvas=canvas,
        tray=tray,
        cables_on_tray=list(cables_on_tray),
        scale=float(scale),
        spacing_mm=float(effective_spacing if effective_spacing is not None else DEFAULT_SPACING_MM),
        settings={key: resolve_category_settings(layout, key) for key in CATEGORY_KEYS},
    )

    _draw_base_structure(frame)

    cursor = Cursor(
        left_x=CANVAS_MARGIN + frame.spacing_px,
        right_x=CANVAS_MARGIN + frame.width_mm * frame.scale - frame.spacing_px,
    )
    for category, bands in (cable_bundles or {}).items():
        drawer = CATEGORY_DRAWERS.get(category.strip().lower())
        if drawer is not None:
            cursor = drawer(frame, bands, cursor)

    _draw_separators(frame, cursor)


def render_tray_svg(
    tray: TrayModel,
    cables_on_tray: Sequence[CableModel],
    layout: CableLayout | None = None,
    scale: float = 1.0,
    spacing_mm: float | None = None,
) -> str:
    canvas = SvgCanvas()
    draw_tray_layout(
        canvas, tray, cables_on_tray, build_cable_bundles(cables_on_tray), scale, spacing_mm, layout
    )
    return canvas.to_svg()
