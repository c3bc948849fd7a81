# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
from __future__ import annotations

import pytest

from services.supports import KN_PER_KG, calculate_supports, calculate_weight_load


@pytest.mark.parametrize(
    ("length_mm", "expected"),
    [
        (10000, 6),
        (10300, 6),
        (10500, 7),
        (1000, 2),
        (2000, 2),
    ],
)
def test_support_count(length_mm, expected) -> None:
    assert calculate_supports(length_mm, 2.0, None).supports_count == expected


def test_catalogue_distance_for_kl_tray_type() -> None:
    result = calculate_supports(6000, None, None, " KL 100.603 F ")
    assert result.distance_m == 2.0
    assert result.supports_count == 4


def test_no_distance_or_length_gives_no_count() -> None:
    assert calculate_supports(6000, None, None, "other").supports_count is None
    assert calculate_supports(None, 2.0, None).supports_count is None
    assert calculate_supports(6000, -1, None).distance_m is None


def test_support_weights() -> None:
    result = calculate_supports(10000, 2.0, 1.5)
    assert result.total_weight_kg == pytest.approx(9.0)
    assert result.weight_per_m_kg == pytest.approx(0.9)


def test_weight_load_combines_tray_supports_and_cables() -> None:
    load = calculate_weight_load(5.0, 0.9, [1.0, None, 2.0], 10.0)
    assert load.tray_load_per_m_kg == pytest.approx(5.9)
    assert load.cables_load_per_m_kg == pytest.approx(3.0)
    assert load.total_load_per_m_kg == pytest.approx(8.9)
    assert load.total_weight_kg == pytest.approx(89.0)
    assert load.total_load_per_m_kn == pytest.approx(8.9 * KN_PER_KG)


def test_weight_load_without_data() -> None:
    load = calculate_weight_load(None, 0.9, [], 10.0)
    assert load.tray_load_per_m_kg is None
    assert load.cables_load_per_m_kg is None
    assert load.total_load_per_m_kn is None
