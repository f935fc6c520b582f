"""Unit tests for the allocation rebalancer domain service."""

import pytest

from sentiment_api.domain.entities.allocation import AllocationEntry
from sentiment_api.domain.exceptions import CannotReconcileAllocationsError, DataValidationError
from sentiment_api.domain.services.rebalancer import AllocationRebalancer, round_half_up


def _entries(*specs) -> list[AllocationEntry]:
    """Build entries from (id, allocation, locked) tuples; symbol = id."""
    return [AllocationEntry(id=i, symbol=i, allocation=a, locked=locked) for i, a, locked in specs]


def _allocations(entries: list[AllocationEntry]) -> dict[str, float]:
    return {e.id: e.allocation for e in entries}


class TestRoundHalfUp:
    def test_rounds_halves_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(33.5) == 34

    def test_rounds_to_nearest(self):
        assert round_half_up(33.4) == 33
        assert round_half_up(33.6) == 34


class TestSetAllocation:
    """Tests for AllocationRebalancer.set_allocation."""

    def test_locked_peer_excluded(self):
        """A=50, B=30, C=20 locked: moving A to 60 takes the full 10 from B."""
        rebalancer = AllocationRebalancer(
            _entries(("A", 50, False), ("B", 30, False), ("C", 20, True))
        )
        result = _allocations(rebalancer.set_allocation("A", 60))

        assert result["A"] == pytest.approx(60)
        assert result["B"] == pytest.approx(20)
        assert result["C"] == pytest.approx(20)

    def test_peers_absorb_delta_proportionally(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 40, False), ("B", 40, False), ("C", 20, False))
        )
        result = _allocations(rebalancer.set_allocation("A", 60))

        assert result["A"] == pytest.approx(60)
        assert result["B"] == pytest.approx(80 / 3)
        assert result["C"] == pytest.approx(40 / 3)
        # Relative ranking of peers is kept
        assert result["B"] == pytest.approx(2 * result["C"])

    def test_zero_pool_split_evenly(self):
        """Peers all at zero share what the target leaves."""
        rebalancer = AllocationRebalancer(
            _entries(("A", 100, False), ("B", 0, False), ("C", 0, False))
        )
        result = _allocations(rebalancer.set_allocation("A", 40))

        assert result == pytest.approx({"A": 40, "B": 30, "C": 30})

    def test_rejected_when_all_peers_locked(self):
        entries = _entries(("A", 50, False), ("B", 50, True))
        rebalancer = AllocationRebalancer(entries)
        result = rebalancer.set_allocation("A", 70)

        assert _allocations(result) == {"A": 50, "B": 50}
        assert _allocations(rebalancer.entries) == {"A": 50, "B": 50}

    def test_tiny_delta_is_noop(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))
        result = rebalancer.set_allocation("A", 50.0005)

        assert _allocations(result) == {"A": 50, "B": 50}

    def test_value_clamped_to_range(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))

        high = _allocations(rebalancer.set_allocation("A", 150))
        assert high == pytest.approx({"A": 100, "B": 0})

        low = _allocations(rebalancer.set_allocation("A", -10))
        assert low == pytest.approx({"A": 0, "B": 100})

    def test_unknown_id_is_noop(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))
        result = rebalancer.set_allocation("Z", 10)

        assert _allocations(result) == {"A": 50, "B": 50}

    @pytest.mark.parametrize("target,value", [("A", 90), ("B", 5), ("C", 0), ("A", 33.3)])
    def test_sum_is_100_after_successful_change(self, target, value):
        rebalancer = AllocationRebalancer(
            _entries(("A", 10, False), ("B", 10, False), ("C", 80, True), ("D", 0, False))
        )
        result = rebalancer.set_allocation(target, value)

        assert sum(e.allocation for e in result) == pytest.approx(100)

    def test_notifies_listener_with_new_state(self):
        seen = []
        rebalancer = AllocationRebalancer(
            _entries(("A", 50, False), ("B", 50, False)), on_change=seen.append
        )
        rebalancer.set_allocation("A", 70)

        assert len(seen) == 1
        assert _allocations(seen[0]) == pytest.approx({"A": 70, "B": 30})

    def test_rejected_change_does_not_notify(self):
        seen = []
        rebalancer = AllocationRebalancer(
            _entries(("A", 50, False), ("B", 50, True)), on_change=seen.append
        )
        rebalancer.set_allocation("A", 70)

        assert seen == []

    def test_returned_snapshot_is_a_copy(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))
        result = rebalancer.set_allocation("A", 70)
        result[0].allocation = 999

        assert rebalancer.entries[0].allocation == pytest.approx(70)


class TestSubscribe:
    def test_unsubscribe_stops_notifications(self):
        seen = []
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))
        unsubscribe = rebalancer.subscribe(seen.append)

        rebalancer.set_allocation("A", 60)
        unsubscribe()
        rebalancer.set_allocation("A", 70)

        assert len(seen) == 1


class TestResetToEqual:
    """Tests for AllocationRebalancer.reset_to_equal."""

    def test_three_unlocked_remainder_to_first(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 70, False), ("B", 20, False), ("C", 10, False))
        )
        result = _allocations(rebalancer.reset_to_equal())

        assert result == {"A": 34, "B": 33, "C": 33}
        assert sum(result.values()) == 100

    def test_locked_entries_keep_their_share(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 50, True), ("B", 10, False), ("C", 20, False), ("D", 20, False))
        )
        result = _allocations(rebalancer.reset_to_equal())

        assert result == {"A": 50, "B": 18, "C": 16, "D": 16}

    def test_first_unlocked_gets_remainder_even_when_not_first(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 40, True), ("B", 0, False), ("C", 0, False), ("D", 0, False),
                     ("E", 0, False), ("F", 0, False), ("G", 0, False), ("H", 0, False))
        )
        result = _allocations(rebalancer.reset_to_equal())

        # 60 left over 7 unlocked entries: floor 8 each, shortfall 4 to B
        assert result["B"] == 12
        assert all(result[k] == 8 for k in "CDEFGH")
        assert sum(result.values()) == 100

    def test_all_locked_is_noop(self):
        seen = []
        rebalancer = AllocationRebalancer(
            _entries(("A", 60, True), ("B", 30, True)), on_change=seen.append
        )
        result = _allocations(rebalancer.reset_to_equal())

        assert result == {"A": 60, "B": 30}
        assert seen == []

    def test_locked_over_100_leaves_unlocked_at_zero(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 70, True), ("B", 40, True), ("C", 5, False))
        )
        result = _allocations(rebalancer.reset_to_equal())

        assert result["C"] == 0


class TestFinalizeForSave:
    """Tests for AllocationRebalancer.finalize_for_save."""

    def test_rounding_shortfall_goes_to_first_unlocked(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 33.4, False), ("B", 33.3, False), ("C", 33.3, False))
        )
        result = _allocations(rebalancer.finalize_for_save())

        assert result == {"A": 34, "B": 33, "C": 33}

    def test_first_locked_entry_is_skipped(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 33.4, True), ("B", 33.3, False), ("C", 33.3, False))
        )
        result = _allocations(rebalancer.finalize_for_save())

        assert result == {"A": 33, "B": 34, "C": 33}

    def test_rounding_overshoot_taken_from_first_unlocked(self):
        rebalancer = AllocationRebalancer(_entries(("A", 12.5, False), ("B", 87.5, False)))
        result = _allocations(rebalancer.finalize_for_save())

        assert result == {"A": 12, "B": 88}

    def test_idempotent_on_integer_set(self):
        entries = _entries(("A", 34, False), ("B", 33, False), ("C", 33, True))
        rebalancer = AllocationRebalancer(entries)

        first = _allocations(rebalancer.finalize_for_save())
        second = _allocations(rebalancer.finalize_for_save())

        assert first == second == {"A": 34, "B": 33, "C": 33}

    def test_all_locked_and_off_by_rounding_raises(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 33.4, True), ("B", 33.3, True), ("C", 33.3, True))
        )
        with pytest.raises(CannotReconcileAllocationsError) as exc_info:
            rebalancer.finalize_for_save()

        assert exc_info.value.rounded_total == 99
        assert "all stocks are locked" in str(exc_info.value)

    def test_all_locked_summing_to_100_is_fine(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, True), ("B", 50, True)))
        result = _allocations(rebalancer.finalize_for_save())

        assert result == {"A": 50, "B": 50}


class TestToggleLock:
    def test_flips_lock(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False), ("B", 50, False)))

        assert rebalancer.toggle_lock("A")[0].locked is True
        assert rebalancer.toggle_lock("A")[0].locked is False

    def test_unknown_id_ignored(self):
        rebalancer = AllocationRebalancer(_entries(("A", 50, False)))
        result = rebalancer.toggle_lock("Z")

        assert [e.locked for e in result] == [False]


class TestApplySelection:
    """Tests for AllocationRebalancer.apply_selection."""

    def test_continuing_stocks_take_up_gap(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 50, False), ("B", 30, False), ("C", 20, False))
        )
        result = rebalancer.apply_selection(
            _entries(("A", 0, False), ("B", 0, False), ("D", 25, True))
        )

        assert [e.id for e in result] == ["A", "B", "D"]
        assert _allocations(result) == {"A": 60, "B": 40, "D": 0}
        # New stocks start unlocked
        assert result[2].locked is False

    def test_continuing_stocks_keep_lock(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 40, True), ("B", 30, False), ("C", 30, False))
        )
        result = rebalancer.apply_selection(_entries(("A", 0, False), ("B", 0, False)))

        assert _allocations(result) == {"A": 40, "B": 60}
        assert result[0].locked is True

    def test_rounding_corrected_on_first_unlocked_continuing(self):
        rebalancer = AllocationRebalancer(
            _entries(("A", 33.3, False), ("B", 33.3, False), ("C", 33.4, False))
        )
        result = rebalancer.apply_selection(
            _entries(("A", 0, False), ("B", 0, False), ("C", 0, False))
        )

        assert _allocations(result) == {"A": 34, "B": 33, "C": 33}

    def test_fresh_selection_starts_equal(self):
        rebalancer = AllocationRebalancer(_entries(("A", 100, False)))
        result = rebalancer.apply_selection(
            _entries(("X", 0, False), ("Y", 0, False), ("Z", 0, False))
        )

        assert _allocations(result) == {"X": 34, "Y": 33, "Z": 33}


class TestDuplicateIds:
    def test_constructor_rejects_duplicate_ids(self):
        with pytest.raises(DataValidationError, match="Duplicate"):
            AllocationRebalancer(
                _entries(("A", 50, False), ("A", 50, False), ("B", 0, False))
            )

    def test_selection_rejects_duplicate_ids(self):
        rebalancer = AllocationRebalancer(_entries(("A", 100, False)))

        with pytest.raises(DataValidationError):
            rebalancer.apply_selection(_entries(("B", 0, False), ("B", 0, False)))
        assert _allocations(rebalancer.entries) == {"A": 100}
