# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Support counts and weight load per tray run."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable

KN_PER_KG = 9.80665 / 1000

# tray types with a catalogue support distance, in metres
DEFAULT_SUPPORT_DISTANCES_M = {"kl 100.603 f": 2.0}


@dataclass(frozen=True)
class SupportCalculation:
    length_m: float | None
    distance_m: float | None
    supports_count: int | None
    weight_per_piece_kg: float | None
    total_weight_kg: float | None
    weight_per_m_kg: float | None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WeightLoad:
    tray_load_per_m_kg: float | None
    tray_total_weight_kg: float | None
    cables_load_per_m_kg: float | None
    cables_total_weight_kg: float | None
    total_load_per_m_kg: float | None
    total_weight_kg: float | None
    total_load_per_m_kn: float | None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _finite(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def resolve_support_distance(distance_m: float | None, tray_type: str | None) -> float | None:
    distance = _finite(distance_m)
    if (distance is None or distance <= 0) and tray_type:
        distance = DEFAULT_SUPPORT_DISTANCES_M.get(tray_type.strip().lower(), distance)
    if distance is not None and distance <= 0:
        return None
    return distance


def calculate_supports(
    length_mm: float | None,
    distance_m: float | None,
    weight_per_piece_kg: float | None,
    tray_type: str | None = None,
) -> SupportCalculation:
    """Number of supports along a tray run and their weight.

    One support per full segment plus one at the end, never fewer than two.
    A trailing remainder longer than a fifth of the distance gets its own
    support.
    """
    length = _finite(length_mm)
    length_m = length / 1000 if length is not None and length > 0 else None
    distance = resolve_support_distance(distance_m, tray_type)
    piece_weight = _finite(weight_per_piece_kg)

    if length_m is None or distance is None:
        return SupportCalculation(length_m, distance, None, piece_weight, None, None)

    segments = math.floor(length_m / distance)
    count = max(2, segments + 1)
    remainder = length_m - segments * distance
    if segments >= 1 and remainder > distance * 0.2:
        count += 1

    total = count * piece_weight if piece_weight is not None else None
    per_m = total / length_m if total is not None else None
    return SupportCalculation(length_m, distance, count, piece_weight, total, per_m)


def calculate_weight_load(
    tray_weight_per_m_kg: float | None,
    support_weight_per_m_kg: float | None,
    cable_weights_per_m_kg: Iterable[float | None],
    length_m: float | None,
) -> WeightLoad:
    tray_own = _finite(tray_weight_per_m_kg)
    support = _finite(support_weight_per_m_kg)
    tray_load = tray_own + support if tray_own is not None and support is not None else None

    known = [w for w in (_finite(w) for w in cable_weights_per_m_kg) if w is not None]
    cables_load = sum(known) if known else None

    length = _finite(length_m)
    if length is not None and length <= 0:
        length = None

    tray_total = tray_load * length if tray_load is not None and length is not None else None
    cables_total = (
        cables_load * length if cables_load is not None and length is not None else None
    )
    total_load = (
        tray_load + cables_load if tray_load is not None and cables_load is not None else None
    )
    total_weight = (
        tray_total + cables_total if tray_total is not None and cables_total is not None else None
    )
    total_kn = total_load * KN_PER_KG if total_load is not None else None
    return WeightLoad(
        tray_load, tray_total, cables_load, cables_total, total_load, total_weight, total_kn
    )
