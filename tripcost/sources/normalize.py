"""Boundary normalization for expense items and group members.

Records arrive with more than one spelling for the same field (``paidBy``
from the API, ``paid_by`` from raw database rows, ``totalCost`` on lodging).
Everything is mapped to the canonical ``ExpenseItem`` / ``Member`` models
here, before any item reaches the allocator.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.exceptions import ValidationError
from ..core.models import ExpenseItem, Member
from ..core.numeric import coerce_cost, is_payer_list
from ..core.types import ExpenseCategory, MemberId

logger = logging.getLogger(__name__)

# Known spellings of the payer list, in lookup order
PAYER_FIELDS: tuple[str, ...] = ("payers", "paidBy", "paid_by", "PaidBy", "paidby")

COST_FIELDS: dict[ExpenseCategory, tuple[str, ...]] = {
    ExpenseCategory.FLIGHTS: ("cost",),
    ExpenseCategory.LODGING: ("totalCost", "total_cost", "cost"),
    ExpenseCategory.TOURS: ("cost",),
}

LABEL_FIELDS: tuple[str, ...] = (
    "label",
    "name",
    "flightNumber",
    "flight_number",
    "passengerName",
    "passenger_name",
)


def normalize_payers(value: Any) -> tuple[MemberId, ...] | None:
    """
    Normalize a raw payer list.

    Returns None when the value is absent or is not a list (a malformed
    value is treated as absent). Falsy entries are dropped, ids become str.
    """
    if not is_payer_list(value):
        return None
    return tuple(str(p) for p in value if p)


def extract_payers(raw: Mapping[str, Any]) -> tuple[MemberId, ...] | None:
    """Return the payer list from the first known field that holds a list."""
    for field in PAYER_FIELDS:
        payers = normalize_payers(raw.get(field))
        if payers is not None:
            return payers
    return None


def extract_cost(raw: Mapping[str, Any], category: ExpenseCategory) -> float:
    """Return the coerced cost from the first populated cost field.

    ``None`` and blank strings do not count as populated.
    """
    for field in COST_FIELDS.get(category, ("cost",)):
        value = raw.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return coerce_cost(value)
    return 0.0


def normalize_expense_item(raw: Any, category: ExpenseCategory) -> ExpenseItem:
    """
    Map one raw record onto the canonical ExpenseItem.

    Args:
        raw: Record as received from the API, database or export file
        category: Category the record belongs to

    Returns:
        ExpenseItem with canonical cost and payers

    Raises:
        ValidationError: If the record is not a mapping
    """
    if isinstance(raw, ExpenseItem):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{category.value}[]", repr(raw), "expected a mapping")

    label = None
    for field in LABEL_FIELDS:
        if raw.get(field):
            label = str(raw[field])
            break

    item_id = raw.get("id")

    return ExpenseItem(
        category=category,
        cost=extract_cost(raw, category),
        payers=extract_payers(raw),
        item_id=str(item_id) if item_id is not None else None,
        label=label,
    )


def normalize_expense_items(
    raws: Iterable[Any] | None,
    category: ExpenseCategory,
) -> list[ExpenseItem]:
    """Normalize a sequence of raw records, skipping ones that are not mappings."""
    items = []
    for index, raw in enumerate(raws or []):
        try:
            items.append(normalize_expense_item(raw, category))
        except ValidationError as e:
            logger.warning(f"Skipping {category.value} record #{index}: {e.reason}")
    return items


def normalize_member(raw: Any) -> Member:
    """
    Map one raw group member record onto Member.

    Guest status comes from ``isGuest``/``is_guest`` when present. Otherwise
    a record with a ``guestName`` and no linked user is a guest.
    """
    if isinstance(raw, Member):
        return raw
    if isinstance(raw, str):
        return Member(id=raw)
    if not isinstance(raw, Mapping):
        raise ValidationError("members[]", repr(raw), "expected a mapping or an id")

    member_id = raw.get("id") or raw.get("memberId") or raw.get("member_id")
    if not member_id:
        raise ValidationError("members[].id", repr(raw), "member id is required")

    if "isGuest" in raw or "is_guest" in raw:
        is_guest = bool(raw.get("isGuest", raw.get("is_guest")))
    else:
        has_user = bool(raw.get("userId") or raw.get("user_id"))
        is_guest = bool(raw.get("guestName") or raw.get("guest_name")) and not has_user

    full_name = " ".join(
        str(part) for part in (raw.get("firstName"), raw.get("lastName")) if part
    )
    name = (
        raw.get("name")
        or full_name
        or raw.get("guestName")
        or raw.get("guest_name")
        or raw.get("email")
        or raw.get("userEmail")
    )

    return Member(id=str(member_id), is_guest=is_guest, name=str(name) if name else None)


def normalize_members(raws: Iterable[Any] | None) -> list[Member]:
    """Normalize member records, skipping malformed ones."""
    members = []
    for index, raw in enumerate(raws or []):
        try:
            members.append(normalize_member(raw))
        except ValidationError as e:
            logger.warning(f"Skipping member record #{index}: {e.reason}")
    return members


def build_roster(members: Iterable[Member]) -> list[MemberId]:
    """
    Build the allocation roster: ordered, de-duplicated non-guest ids.

    Guests can be tagged as payers but never receive an allocation slot.
    """
    roster: list[MemberId] = []
    seen: set[MemberId] = set()
    for member in members:
        if member.is_guest or not member.id or member.id in seen:
            continue
        seen.add(member.id)
        roster.append(member.id)
    return roster
