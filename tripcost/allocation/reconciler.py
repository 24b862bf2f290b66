"""Category reconciler - forces per-member totals to sum to the category total.

Cost the allocator could not attribute (explicitly unassigned items, legacy
items with fallback disabled, shares owed by guests) is spread evenly across
the roster. Second-order drift from that even split lands on the first
roster member.
"""

import logging
from collections.abc import Mapping, Sequence

from ..core.numeric import EPSILON, coerce_cost
from ..core.types import MemberId

logger = logging.getLogger(__name__)


def reconcile(
    total: float,
    per_member_totals: Mapping[MemberId, float],
    roster_ids: Sequence[MemberId],
) -> dict[MemberId, float]:
    """
    Balance a category's per-member totals against its raw total.

    Args:
        total: Raw category total (sum of every item's cost)
        per_member_totals: Allocator output; ids outside the roster are ignored
        roster_ids: Current non-guest member ids

    Returns:
        Fresh mapping keyed by ``roster_ids`` that sums to ``total`` within
        1e-6. Empty when the roster is empty.
    """
    balanced: dict[MemberId, float] = {
        member_id: coerce_cost(per_member_totals.get(member_id, 0.0))
        for member_id in roster_ids
    }
    if not balanced:
        return balanced

    total = coerce_cost(total)
    assigned = sum(balanced.values())
    remainder = total - assigned
    if abs(remainder) <= EPSILON:
        return balanced

    even_share = remainder / len(balanced)
    for member_id in balanced:
        balanced[member_id] += even_share

    adjust = total - sum(balanced.values())
    if abs(adjust) > EPSILON:
        balanced[roster_ids[0]] += adjust

    logger.debug(
        f"Reconciled {remainder:.6f} unassigned across {len(balanced)} members"
    )
    return balanced
