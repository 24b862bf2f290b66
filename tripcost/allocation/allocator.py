"""Payer allocator - splits item costs across the members who paid.

For each item the cost is divided evenly across its effective payer set
and added to each payer's running total. Floating-point drift from the
division is applied entirely to the first payer listed on the item.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from ..core.models import ExpenseItem
from ..core.numeric import EPSILON, coerce_cost, is_payer_list
from ..core.types import MemberId

logger = logging.getLogger(__name__)

T = TypeVar("T")


def effective_payers(
    raw_payers: Iterable[MemberId] | None,
    roster_ids: Sequence[MemberId],
    fallback_on_empty: bool = False,
) -> list[MemberId]:
    """
    Resolve which members an item's cost is split across.

    Args:
        raw_payers: Payer list as stored on the item, or None if absent.
            A value that is not a list of ids counts as absent.
        roster_ids: Current non-guest member ids
        fallback_on_empty: If True, an empty (after filtering) payer list
            falls back to the whole roster. If False, only an absent list
            (legacy record) falls back.

    Returns:
        Ordered list of payer ids; empty means the cost stays unassigned
    """
    if not is_payer_list(raw_payers):
        raw_payers = None

    payers = [p for p in (raw_payers or []) if p]
    if payers:
        return payers

    if fallback_on_empty:
        should_fallback = True
    else:
        should_fallback = raw_payers is None

    return list(roster_ids) if should_fallback else []


def allocate(
    items: Iterable[T],
    get_cost: Callable[[T], Any],
    get_payers: Callable[[T], Iterable[MemberId] | None],
    roster_ids: Sequence[MemberId],
    fallback_on_empty: bool = False,
) -> dict[MemberId, float]:
    """
    Split one category's item costs across their payers.

    Args:
        items: Category records (any type)
        get_cost: Accessor returning an item's cost
        get_payers: Accessor returning an item's payer list (None if absent)
        roster_ids: Current non-guest member ids
        fallback_on_empty: Which "no payer" condition triggers an even split

    Returns:
        Fresh mapping whose keys are exactly ``roster_ids``. Shares owed by
        ids outside the roster are not stored and stay unassigned.
    """
    totals: dict[MemberId, float] = {member_id: 0.0 for member_id in roster_ids}

    for item in items:
        cost = coerce_cost(get_cost(item))
        effective = effective_payers(get_payers(item), roster_ids, fallback_on_empty)

        if not cost or not effective:
            continue

        share = cost / len(effective)
        for member_id in effective:
            if member_id in totals:
                totals[member_id] += share
            else:
                logger.debug(f"Dropping share {share:.6f} for non-roster payer {member_id}")

        remainder = cost - share * len(effective)
        if abs(remainder) > EPSILON and effective[0] in totals:
            totals[effective[0]] += remainder

    return totals


def allocate_items(
    items: Iterable[ExpenseItem],
    roster_ids: Sequence[MemberId],
    fallback_on_empty: bool = False,
) -> dict[MemberId, float]:
    """Allocate normalized ExpenseItems (canonical field accessors)."""
    return allocate(
        items,
        get_cost=lambda item: item.cost,
        get_payers=lambda item: item.payers,
        roster_ids=roster_ids,
        fallback_on_empty=fallback_on_empty,
    )


def category_total(items: Iterable[T], get_cost: Callable[[T], Any]) -> float:
    """Sum raw costs across all items, attributable or not."""
    return sum((coerce_cost(get_cost(item)) for item in items), 0.0)
