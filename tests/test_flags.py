"""Tests for side flags, filters and positions."""

from __future__ import annotations

import pytest

from nodeboundary.flags import Filter, Position, Side, coerce_side


def test_sides_are_ordered_by_tree_position() -> None:
    assert Side.BEFORE_OPEN < Side.AFTER_OPEN < Side.BEFORE_CLOSE < Side.AFTER_CLOSE


def test_positions_interleave_with_sides() -> None:
    assert Position.BEFORE < Side.BEFORE_OPEN
    assert Side.AFTER_OPEN < Position.INSIDE < Side.BEFORE_CLOSE
    assert Side.AFTER_CLOSE < Position.AFTER


@pytest.mark.parametrize(
    ("mask", "members"),
    [
        (Filter.ALL, {Side.BEFORE_OPEN, Side.AFTER_OPEN, Side.BEFORE_CLOSE, Side.AFTER_CLOSE}),
        (Filter.OPEN, {Side.BEFORE_OPEN, Side.AFTER_OPEN}),
        (Filter.CLOSE, {Side.BEFORE_CLOSE, Side.AFTER_CLOSE}),
        (Filter.BEFORE, {Side.BEFORE_OPEN, Side.BEFORE_CLOSE}),
        (Filter.AFTER, {Side.AFTER_OPEN, Side.AFTER_CLOSE}),
        (Filter.INSIDE, {Side.AFTER_OPEN, Side.BEFORE_CLOSE}),
        (Filter.OUTSIDE, {Side.BEFORE_OPEN, Side.AFTER_CLOSE}),
    ],
)
def test_filter_masks_group_sides(mask: int, members: set[Side]) -> None:
    assert {side for side in Side if side.matches(mask)} == members


def test_side_helper_properties() -> None:
    assert Side.AFTER_OPEN.is_open and Side.AFTER_OPEN.is_inside
    assert not Side.AFTER_OPEN.is_before
    assert Side.BEFORE_CLOSE.is_before and not Side.BEFORE_CLOSE.is_open
    assert not Side.AFTER_CLOSE.is_inside


def test_coerce_side_accepts_members_and_plain_ints() -> None:
    assert coerce_side(Side.AFTER_CLOSE) is Side.AFTER_CLOSE
    assert coerce_side(0b1000) is Side.BEFORE_CLOSE


@pytest.mark.parametrize(
    "value",
    [Filter.OUTSIDE, Filter.ALL, 0, 3, 0b100, True, "BEFORE_OPEN", None, 1.0, Position.INSIDE],
)
def test_coerce_side_rejects_non_sides(value: object) -> None:
    assert coerce_side(value) is None
