"""
Core Data Models for Bill Splitter

These models define the schemas for everything the engine consumes
and produces. They are designed to:
1. Enforce type safety at runtime
2. Give explicit defaults to optional fields (no undefined-coalescing)
3. Be serializable for storage and logging
4. Stay immutable once built, so calculations are pure

DESIGN DECISION: Bills, items and people are frozen Pydantic v2 models.
Edits produce a new, re-validated snapshot, which is what lets an
archived bill stay untouched while an editable copy is worked on.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def generate_id() -> str:
    """Short random identifier for people, items and bills."""
    return uuid4().hex[:12]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SplitType(str, Enum):
    """
    How an item's price is divided among the people assigned to it.

    EQUAL: price divided evenly among everyone assigned.
    CUSTOM: explicit per-person amounts from the item's custom_splits.
    """
    EQUAL = "equal"
    CUSTOM = "custom"


# =============================================================================
# CURRENCY MODEL
# =============================================================================

class Currency(BaseModel):
    """
    A supported currency with a fixed rate relative to USD.

    rate_to_usd is "units of this currency per 1 USD".
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    code: str = Field(
        ...,
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code"
    )
    symbol: str = Field(
        ...,
        min_length=1,
        max_length=5,
        description="Display symbol"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Human-readable currency name"
    )
    rate_to_usd: Decimal = Field(
        ...,
        gt=0,
        description="Units of this currency per 1 USD"
    )

    @field_validator('code')
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return v.upper()


# =============================================================================
# CORE BILL MODELS
# =============================================================================

class Person(BaseModel):
    """Someone taking part in a bill."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Identifier, unique within a bill"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    color: str = Field(
        default="#8395A7",
        description="Display colour, not interpreted by the engine"
    )


class Item(BaseModel):
    """
    A line on the bill.

    price is expressed in currency_code, which may differ from the
    bill's base currency. An item assigned to nobody costs nobody anything.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Item identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Item name as entered"
    )
    price: Decimal = Field(
        ...,
        ge=0,
        description="Price in the item's own currency"
    )
    currency_code: str = Field(
        default="USD",
        description="Currency the price is expressed in"
    )
    assigned_to: list[str] = Field(
        default_factory=list,
        description="Ids of the people sharing this item"
    )
    split_type: SplitType = Field(
        default=SplitType.EQUAL,
        description="How the price is divided"
    )
    custom_splits: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Per-person amounts, used when split_type is custom"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Manual category, overrides keyword detection"
    )

    @field_validator('currency_code')
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator('assigned_to')
    @classmethod
    def dedupe_assignees(cls, v: list[str]) -> list[str]:
        """assigned_to behaves as an ordered set."""
        return list(dict.fromkeys(v))


class Bill(BaseModel):
    """
    A bill: people, items, and the tax and tip on top.

    Tax and tip default to 0 and to the bill's base currency when no
    currency of their own is set.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    # Identity
    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Bill identifier"
    )
    name: str = Field(
        default="New Bill",
        min_length=1,
        max_length=200,
        description="Bill name"
    )
    base_currency_code: str = Field(
        default="USD",
        description="Currency the bill's totals are reported in"
    )

    # Contents
    people: list[Person] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)

    # Extras
    tax: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Tax amount in tax_currency"
    )
    tax_currency_code: Optional[str] = None
    tip: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Tip amount in tip_currency"
    )
    tip_currency_code: Optional[str] = None

    # Context
    location: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Restaurant or store name"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    tags: list[str] = Field(default_factory=list)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the bill was created"
    )
    updated_at: Optional[datetime] = None

    @field_validator('base_currency_code')
    @classmethod
    def uppercase_base_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator('tax_currency_code', 'tip_currency_code')
    @classmethod
    def uppercase_optional_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().upper() or None

    @model_validator(mode='after')
    def validate_people(self) -> 'Bill':
        """Person ids must be unique within a bill."""
        seen = set()
        for person in self.people:
            if person.id in seen:
                raise ValueError(f"Duplicate person id in bill: {person.id}")
            seen.add(person.id)
        return self

    @property
    def effective_tax_currency(self) -> str:
        return self.tax_currency_code or self.base_currency_code

    @property
    def effective_tip_currency(self) -> str:
        return self.tip_currency_code or self.base_currency_code

    def has_person(self, person_id: str) -> bool:
        return any(p.id == person_id for p in self.people)

    def get_person(self, person_id: str) -> Optional[Person]:
        for person in self.people:
            if person.id == person_id:
                return person
        return None


# =============================================================================
# SUMMARY MODELS (derived, never persisted)
# =============================================================================

class ItemShare(BaseModel):
    """One item's contribution to a person's summary."""
    model_config = ConfigDict(frozen=True)

    item_name: str
    amount: Decimal = Field(
        ...,
        description="Raw share in the item's currency, rounded to cents"
    )
    currency: str
    converted_amount: Decimal = Field(
        ...,
        description="Share in the bill's base currency, rounded to cents"
    )


class PersonSummary(BaseModel):
    """
    Per-person breakdown of a bill.

    total_amount = subtotal + the person's proportional tax and tip,
    rounded once at the end. tax_share and tip_share are rounded
    individually for display, so they may differ from
    total_amount - subtotal by a cent.
    """
    model_config = ConfigDict(frozen=True)

    person_id: str
    name: str
    total_amount: Decimal
    subtotal: Decimal = Decimal("0.00")
    tax_share: Decimal = Decimal("0.00")
    tip_share: Decimal = Decimal("0.00")
    items: list[ItemShare] = Field(default_factory=list)
