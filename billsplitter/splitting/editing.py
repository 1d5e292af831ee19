"""
Bill Editing

Copy-on-write edits for the bill being worked on. Every function
returns a new, re-validated Bill and leaves its input untouched, so a
bill loaded from history is never changed in place.
"""

import random
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from billsplitter.models.bill import Bill, Item, Person, generate_id, utc_now

PERSON_COLORS = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FECA57",
    "#FF9FF3", "#54A0FF", "#5F27CD", "#00D2D3", "#FF9F43",
    "#10AC84", "#EE5A24", "#0C2461", "#8395A7", "#222F3E",
)

# Bill fields the summary screen is allowed to change directly
EDITABLE_BILL_FIELDS = frozenset({
    "name",
    "base_currency_code",
    "tax",
    "tax_currency_code",
    "tip",
    "tip_currency_code",
    "location",
    "notes",
    "tags",
})

ModelT = TypeVar("ModelT", bound=BaseModel)


def _rebuild(model: ModelT, **updates: Any) -> ModelT:
    """Copy a model with updates applied, running validation again."""
    data = model.model_dump()
    data.update(updates)
    return type(model).model_validate(data)


def random_color() -> str:
    return random.choice(PERSON_COLORS)


def new_bill(name: str = "New Bill", base_currency_code: str = "USD") -> Bill:
    """A blank bill ready for people and items."""
    return Bill(name=name, base_currency_code=base_currency_code)


def add_person(bill: Bill, name: str, color: Optional[str] = None) -> Bill:
    person = Person(name=name, color=color or random_color())
    return _rebuild(bill, people=[*bill.people, person], updated_at=utc_now())


def remove_person(bill: Bill, person_id: str) -> Bill:
    """
    Remove a person and every trace of them from the bill's items:
    their assignment and their custom split entry.
    """
    items = [
        _rebuild(
            item,
            assigned_to=[pid for pid in item.assigned_to if pid != person_id],
            custom_splits={
                pid: amount for pid, amount in item.custom_splits.items() if pid != person_id
            },
        )
        for item in bill.items
    ]
    people = [p for p in bill.people if p.id != person_id]
    return _rebuild(bill, people=people, items=items, updated_at=utc_now())


def add_item(bill: Bill, item: Item) -> Bill:
    return _rebuild(bill, items=[*bill.items, item], updated_at=utc_now())


def update_item(bill: Bill, item_id: str, **updates: Any) -> Bill:
    """Apply field updates to one item. Unknown item ids leave the bill as is."""
    items = [
        _rebuild(item, **updates) if item.id == item_id else item
        for item in bill.items
    ]
    return _rebuild(bill, items=items, updated_at=utc_now())


def remove_item(bill: Bill, item_id: str) -> Bill:
    items = [item for item in bill.items if item.id != item_id]
    return _rebuild(bill, items=items, updated_at=utc_now())


def update_details(bill: Bill, **updates: Any) -> Bill:
    """
    Change tax, tip, currencies, name and other bill-level details.

    Raises ValueError for fields that cannot be edited this way.
    """
    unknown = set(updates) - EDITABLE_BILL_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be edited directly: {sorted(unknown)}")
    return _rebuild(bill, **updates, updated_at=utc_now())


def copy_for_editing(bill: Bill) -> Bill:
    """
    Editable copy of an archived bill.

    Gets a fresh id and creation time so saving it adds a new history
    entry instead of overwriting the snapshot it came from.
    """
    return _rebuild(bill, id=generate_id(), created_at=utc_now(), updated_at=None)
