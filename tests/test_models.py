"""Tests for codecity.models."""

from __future__ import annotations

import dataclasses

import pytest

from codecity.models import DirectoryNode, DirectoryStats, LanguageBreakdown, build_breakdown


def test_breakdown_is_empty_when_total_is_zero() -> None:
    assert build_breakdown({}, 0) == ()
    assert build_breakdown({"Python": 0}, 0) == ()


def test_breakdown_orders_by_lines_and_computes_percentages() -> None:
    breakdown = build_breakdown({"Python": 5, "Rust": 10}, 15)

    assert [item.language for item in breakdown] == ["Rust", "Python"]
    assert breakdown[0].percentage == pytest.approx(66.666, rel=1e-3)
    assert breakdown[1].percentage == pytest.approx(33.333, rel=1e-3)
    assert breakdown[0].color == "#DEA584"
    assert all(0.0 <= item.percentage <= 100.0 for item in breakdown)


def test_breakdown_ties_keep_mapping_order() -> None:
    breakdown = build_breakdown({"Go": 3, "Lua": 3, "C": 3}, 9)
    assert [item.language for item in breakdown] == ["Go", "Lua", "C"]


def test_directory_stats_accumulates_per_language() -> None:
    stats = DirectoryStats()
    stats.add("Python", 4)
    stats.add("Rust", 2)
    stats.add("Python", 1)

    assert stats.lines == 7
    assert stats.languages == {"Python": 5, "Rust": 2}


def test_nodes_are_immutable_and_serialise() -> None:
    leaf = DirectoryNode(
        name="sub",
        path="sub",
        age_days=3,
        lines=5,
        languages=(LanguageBreakdown("Python", 5, 100.0, "#3776AB"),),
    )
    root = DirectoryNode(name="(root)", path="", age_days=9, lines=10, children=(leaf,))

    with pytest.raises(dataclasses.FrozenInstanceError):
        root.lines = 11  # type: ignore[misc]

    payload = root.to_dict()
    assert payload["children"][0] == {
        "name": "sub",
        "path": "sub",
        "age_days": 3,
        "lines": 5,
        "languages": [
            {"language": "Python", "lines": 5, "percentage": 100.0, "color": "#3776AB"}
        ],
        "children": [],
    }
