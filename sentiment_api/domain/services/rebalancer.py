"""Allocation rebalancing domain service.

Keeps a basket's percentage allocations summing to 100 while the user drags a
stock's slider, resets the basket to an equal split, or saves it.

Entries are kept in insertion order. Every "first unlocked entry" tie-break in
this module means the first unlocked entry in that order.
"""

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import replace

from sentiment_api.domain.constants import (
    ALLOCATION_CHANGE_EPSILON,
    ALLOCATION_POOL_EPSILON,
    MAX_ALLOCATION,
    MIN_ALLOCATION,
    TOTAL_ALLOCATION,
)
from sentiment_api.domain.entities.allocation import AllocationEntry
from sentiment_api.domain.exceptions import (
    CannotReconcileAllocationsError,
    DataValidationError,
)

logger = logging.getLogger(__name__)

AllocationListener = Callable[[list[AllocationEntry]], None]


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves away from zero for positives."""
    return float(math.floor(value + 0.5))


def _require_unique_ids(entries: list[AllocationEntry]) -> list[AllocationEntry]:
    """Raise DataValidationError if two entries share an id."""
    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            raise DataValidationError(
                f"Duplicate allocation entry id: {entry.id}", field="id", value=entry.id
            )
        seen.add(entry.id)
    return entries


def _equal_split(entries: list[AllocationEntry]) -> bool:
    """Give every unlocked entry an equal integer share of what locked entries leave.

    Mutates ``entries`` in place. Returns False (and changes nothing) when no
    entry is unlocked.
    """
    unlocked = [e for e in entries if not e.locked]
    if not unlocked:
        return False

    locked_sum = sum(e.allocation for e in entries if e.locked)
    remaining = max(0.0, TOTAL_ALLOCATION - locked_sum)
    # Floor, not round: never overshoot 100 before the correction below
    share = float(math.floor(remaining / len(unlocked)))

    for entry in unlocked:
        entry.allocation = share

    new_total = sum(e.allocation for e in entries)
    if new_total < TOTAL_ALLOCATION:
        unlocked[0].allocation += TOTAL_ALLOCATION - new_total

    return True


class AllocationRebalancer:
    """In-memory allocation state for one basket.

    Every mutating operation returns a snapshot of the new state and pushes
    the same snapshot to subscribers. Operations that end up changing nothing
    return the current snapshot without notifying anyone.
    """

    def __init__(
        self,
        entries: Iterable[AllocationEntry],
        on_change: AllocationListener | None = None,
    ):
        self._entries = _require_unique_ids([replace(e) for e in entries])
        self._listeners: list[AllocationListener] = []
        if on_change is not None:
            self._listeners.append(on_change)

    @property
    def entries(self) -> list[AllocationEntry]:
        """Copy of the current entries, in insertion order."""
        return self._snapshot()

    @property
    def total_allocation(self) -> float:
        """Sum of all allocations."""
        return sum(e.allocation for e in self._entries)

    def subscribe(self, listener: AllocationListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _snapshot(self) -> list[AllocationEntry]:
        return [replace(e) for e in self._entries]

    def _commit(self, entries: list[AllocationEntry]) -> list[AllocationEntry]:
        self._entries = entries
        snapshot = self._snapshot()
        for listener in list(self._listeners):
            listener(self._snapshot())
        return snapshot

    def set_allocation(self, entry_id: str, new_value: float) -> list[AllocationEntry]:
        """Move one entry to ``new_value`` and let unlocked peers absorb the difference.

        Unlocked peers give up (or receive) the delta in proportion to their
        current share of the unlocked pool, so their relative ranking holds.
        When every peer is locked the change is rejected. Afterwards all
        entries are rescaled so the total is exactly 100.

        Args:
            entry_id: Id of the entry being changed
            new_value: Requested allocation, clamped to [0, 100]

        Returns:
            Snapshot of the entries after the operation
        """
        working = self._snapshot()
        target = next((e for e in working if e.id == entry_id), None)
        if target is None:
            logger.debug(f"[Rebalancer] Unknown entry id {entry_id!r}, ignoring")
            return working

        new_value = min(MAX_ALLOCATION, max(MIN_ALLOCATION, float(new_value)))
        delta = new_value - target.allocation
        if abs(delta) < ALLOCATION_CHANGE_EPSILON:
            return working

        others = [e for e in working if not e.locked and e.id != target.id]
        if not others:
            logger.info(
                f"[Rebalancer] Rejected change to {target.symbol}: "
                "no other unlocked entry to redistribute into"
            )
            return working

        pool = sum(e.allocation for e in others)
        if pool > ALLOCATION_POOL_EPSILON:
            for entry in others:
                share = entry.allocation / pool
                entry.allocation = max(0.0, entry.allocation - delta * share)
        else:
            even_share = max(0.0, TOTAL_ALLOCATION - new_value) / len(others)
            for entry in others:
                entry.allocation = even_share

        target.allocation = new_value

        current_sum = sum(e.allocation for e in working)
        if current_sum > 0:
            factor = TOTAL_ALLOCATION / current_sum
            for entry in working:
                entry.allocation *= factor

        return self._commit(working)

    def reset_to_equal(self) -> list[AllocationEntry]:
        """Split whatever locked entries leave equally across unlocked entries.

        Shares are floored to whole points; the shortfall goes to the first
        unlocked entry. No-op when every entry is locked.
        """
        working = self._snapshot()
        if not _equal_split(working):
            logger.info("[Rebalancer] Reset skipped: every entry is locked")
            return working
        return self._commit(working)

    def finalize_for_save(self) -> list[AllocationEntry]:
        """Round every allocation to a whole point and force the total to 100.

        The first unlocked entry absorbs the signed rounding difference.

        Raises:
            CannotReconcileAllocationsError: if the rounded total is not 100
                and every entry is locked
        """
        working = self._snapshot()
        for entry in working:
            entry.allocation = round_half_up(entry.allocation)

        rounded_total = sum(e.allocation for e in working)
        difference = TOTAL_ALLOCATION - rounded_total
        if difference != 0:
            first_unlocked = next((e for e in working if not e.locked), None)
            if first_unlocked is None:
                raise CannotReconcileAllocationsError(
                    f"Cannot adjust allocations to 100% because all stocks are locked "
                    f"(rounded total {rounded_total:g})",
                    rounded_total=rounded_total,
                )
            first_unlocked.allocation += difference

        return self._commit(working)

    def toggle_lock(self, entry_id: str) -> list[AllocationEntry]:
        """Flip an entry's locked flag. Unknown ids are ignored."""
        working = self._snapshot()
        target = next((e for e in working if e.id == entry_id), None)
        if target is None:
            return working
        target.locked = not target.locked
        return self._commit(working)

    def apply_selection(self, entries: Iterable[AllocationEntry]) -> list[AllocationEntry]:
        """Replace the basket's stock selection.

        Stocks already in the basket keep their allocation and lock. New
        stocks start unlocked at 0%. If the continuing stocks sum to less than
        100 the gap is spread evenly over the unlocked continuing ones, then
        everything is rounded and the first unlocked continuing stock absorbs
        the last rounding difference. A selection with no continuing stocks
        starts from an equal split.
        """
        entries = _require_unique_ids(list(entries))
        existing = {e.id: e for e in self._entries}
        continuing: list[AllocationEntry] = []
        added: list[AllocationEntry] = []

        for entry in entries:
            previous = existing.get(entry.id)
            if previous is not None:
                continuing.append(
                    replace(entry, allocation=previous.allocation, locked=previous.locked)
                )
            else:
                added.append(replace(entry, allocation=0.0, locked=False))

        working = continuing + added
        if not continuing:
            _equal_split(working)
            return self._commit(working)

        continuing_total = sum(e.allocation for e in continuing)
        if continuing_total < TOTAL_ALLOCATION:
            unlocked_continuing = [e for e in continuing if not e.locked]
            if unlocked_continuing:
                per_stock = (TOTAL_ALLOCATION - continuing_total) / len(unlocked_continuing)
                for entry in unlocked_continuing:
                    entry.allocation += per_stock

        for entry in working:
            entry.allocation = round_half_up(entry.allocation)

        total = sum(e.allocation for e in continuing)
        if total != TOTAL_ALLOCATION:
            adjustment = next((e for e in continuing if not e.locked), None)
            if adjustment is not None:
                adjustment.allocation += TOTAL_ALLOCATION - total

        return self._commit(working)
