"""
Unit tests for the PatchApplier (mutation ordering and conflict policy).
"""

from __future__ import annotations

import itertools

import pytest

from table_reconciler.differ import Differ
from table_reconciler.patcher import PatchApplier
from table_reconciler.schema import (
    WHOLE_ROW,
    Difference,
    DiffKind,
    DiffStatus,
    Table,
)


@pytest.fixture
def applier() -> PatchApplier:
    return PatchApplier()


@pytest.fixture
def base() -> Table:
    return Table(
        headers=["Name", "City"],
        rows=[["Alice", "NYC"], ["Bob", "LA"], ["Carol", "Chicago"], ["Dan", "Boston"]],
    )


def _accepted(
    row: int,
    column_index: int,
    kind: DiffKind,
    original: str = "",
    new: str = "",
) -> Difference:
    return Difference(
        row=row,
        column="Entire Row" if column_index == WHOLE_ROW else f"Column {column_index + 1}",
        column_index=column_index,
        original_value=original,
        new_value=new,
        kind=kind,
        status=DiffStatus.ACCEPTED,
    )


# ======================================================================
# Cell edits
# ======================================================================

class TestCellEdits:
    def test_modified_cell(self, applier: PatchApplier, base: Table) -> None:
        result = applier.apply(base, [_accepted(2, 1, DiffKind.MODIFIED, "LA", "SF")])
        assert result.rows[1] == ["Bob", "SF"]

    def test_removed_cell_blanks_value(self, applier: PatchApplier, base: Table) -> None:
        result = applier.apply(base, [_accepted(1, 1, DiffKind.REMOVED, "NYC", "")])
        assert result.rows[0] == ["Alice", ""]

    def test_added_cell_extends_row(self, applier: PatchApplier, base: Table) -> None:
        result = applier.apply(base, [_accepted(1, 3, DiffKind.ADDED, "", "10001")])
        assert result.rows[0] == ["Alice", "NYC", "", "10001"]

    def test_only_accepted_participate(self, applier: PatchApplier, base: Table) -> None:
        pending = _accepted(2, 1, DiffKind.MODIFIED, "LA", "SF")
        pending.status = DiffStatus.PENDING
        rejected = _accepted(1, 1, DiffKind.MODIFIED, "NYC", "Boston")
        rejected.status = DiffStatus.REJECTED
        result = applier.apply(base, [pending, rejected])
        assert result.rows == base.rows

    def test_out_of_range_cell_ignored(self, applier: PatchApplier, base: Table) -> None:
        result = applier.apply(base, [_accepted(40, 0, DiffKind.MODIFIED, "x", "y")])
        assert result.rows == base.rows

    def test_base_not_mutated(self, applier: PatchApplier, base: Table) -> None:
        snapshot = base.copy()
        applier.apply(base, [
            _accepted(1, 0, DiffKind.MODIFIED, "Alice", "Alicia"),
            _accepted(2, WHOLE_ROW, DiffKind.REMOVED, "Bob,LA"),
            _accepted(5, WHOLE_ROW, DiffKind.ADDED, "", "Eve,Miami"),
        ])
        assert base == snapshot


# ======================================================================
# Whole-row changes and ordering
# ======================================================================

class TestRowOrdering:
    def test_multiple_removals_hit_the_right_rows(
        self, applier: PatchApplier, base: Table
    ) -> None:
        result = applier.apply(base, [
            _accepted(2, WHOLE_ROW, DiffKind.REMOVED, "Bob,LA"),
            _accepted(3, WHOLE_ROW, DiffKind.REMOVED, "Carol,Chicago"),
        ])
        assert result.rows == [["Alice", "NYC"], ["Dan", "Boston"]]

    def test_additions_appended_in_row_order(
        self, applier: PatchApplier, base: Table
    ) -> None:
        result = applier.apply(base, [
            _accepted(6, WHOLE_ROW, DiffKind.ADDED, "", "Frank,Austin"),
            _accepted(5, WHOLE_ROW, DiffKind.ADDED, "", "Eve,Miami"),
        ])
        assert result.rows[-2:] == [["Eve", "Miami"], ["Frank", "Austin"]]

    def test_cell_edit_applied_before_row_shift(
        self, applier: PatchApplier, base: Table
    ) -> None:
        result = applier.apply(base, [
            _accepted(1, WHOLE_ROW, DiffKind.REMOVED, "Alice,NYC"),
            _accepted(3, 1, DiffKind.MODIFIED, "Chicago", "Denver"),
        ])
        assert result.rows == [["Bob", "LA"], ["Carol", "Denver"], ["Dan", "Boston"]]

    def test_result_independent_of_acceptance_order(
        self, applier: PatchApplier, base: Table
    ) -> None:
        accepted = [
            _accepted(1, WHOLE_ROW, DiffKind.REMOVED, "Alice,NYC"),
            _accepted(3, WHOLE_ROW, DiffKind.REMOVED, "Carol,Chicago"),
            _accepted(2, 0, DiffKind.MODIFIED, "Bob", "Robert"),
            _accepted(4, 2, DiffKind.ADDED, "", "02108"),
            _accepted(5, WHOLE_ROW, DiffKind.ADDED, "", "Eve,Miami"),
        ]
        expected = [["Robert", "LA"], ["Dan", "Boston", "02108"], ["Eve", "Miami"]]
        for ordering in itertools.permutations(accepted):
            assert applier.apply(base, list(ordering)).rows == expected

    def test_headers_unchanged(self, applier: PatchApplier, base: Table) -> None:
        result = applier.apply(base, [_accepted(5, WHOLE_ROW, DiffKind.ADDED, "", "a,b,c")])
        assert result.headers == ["Name", "City"]


# ======================================================================
# Conflict policy
# ======================================================================

class TestConflicts:
    def test_removal_wins_over_cell_edit(
        self, applier: PatchApplier, base: Table
    ) -> None:
        result = applier.apply(base, [
            _accepted(2, 1, DiffKind.MODIFIED, "LA", "SF"),
            _accepted(2, WHOLE_ROW, DiffKind.REMOVED, "Bob,LA"),
        ])
        assert result.rows == [["Alice", "NYC"], ["Carol", "Chicago"], ["Dan", "Boston"]]
        assert all("SF" not in row for row in result.rows)


# ======================================================================
# Round trip with the differ
# ======================================================================

class TestRoundTrip:
    @pytest.mark.parametrize("updated_rows", [
        [["Alice", "NYC"], ["Bob", "SF"], ["Carol", "Chicago"], ["Dan", "Boston"], ["Eve", "Miami"]],
        [["Alice", "Paris"], ["Bobby", "LA"]],
        [],
        [["", "NYC"], ["Bob", "LA"], ["Carol", "Chicago"], ["Dan", "Boston", "MA"]],
    ])
    def test_accept_everything_reproduces_updated(
        self, applier: PatchApplier, base: Table, updated_rows: list[list[str]]
    ) -> None:
        updated = Table(headers=["Name", "City"], rows=updated_rows)
        diffs = Differ().diff(base, updated)
        for d in diffs:
            d.status = DiffStatus.ACCEPTED
        assert applier.apply(base, diffs).rows == updated_rows

    def test_shorter_updated_row_keeps_empty_cells(
        self, applier: PatchApplier
    ) -> None:
        base = Table(headers=["A", "B", "C"], rows=[["1", "2", "3"], ["4", "5", "6"]])
        updated = Table(headers=["A", "B", "C"], rows=[["1"], ["4", "5", "6"]])
        diffs = Differ().diff(base, updated)
        for d in diffs:
            d.status = DiffStatus.ACCEPTED

        result = applier.apply(base, diffs)

        # removed cells are blanked, not truncated
        assert result.rows == [["1", "", ""], ["4", "5", "6"]]
        assert Differ().diff(result, updated) == []
