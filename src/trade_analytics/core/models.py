"""Core domain models for the trade journal.

These are the canonical records consumed by the filter composer and
the metric functions.  Field names are snake_case; camelCase aliases
accept records exported by the journal front end as-is.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import TradeDirection, TradeStatus
from .timeutils import parse_timestamp

_RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """One journaled position, open or closed.

    A trade is closed iff ``exit_price`` is set; only closed trades take
    part in P&L, streak and score aggregates.
    """

    model_config = _RECORD_CONFIG

    id: str
    symbol: str = ""
    direction: TradeDirection
    status: TradeStatus

    # Time
    entry_date: datetime
    exit_date: datetime | None = None

    # Execution
    quantity: float = Field(gt=0)
    entry_price: float
    exit_price: float | None = None
    best_exit_price: float | None = None
    commission: float = 0.0  # Flat; superseded by a per-unit rate when set

    # Risk
    initial_stop_loss: float | None = None
    take_profit_target: float | None = None
    highest_price_reached: float | None = None  # During the trade
    lowest_price_reached: float | None = None

    # Context
    playbook_id: str | None = None  # Strategy reference
    rules_followed: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("entry_date", mode="before")
    @classmethod
    def _parse_entry(cls, value: Any) -> datetime:
        return parse_timestamp(value)

    @field_validator("exit_date", mode="before")
    @classmethod
    def _parse_exit(cls, value: Any) -> datetime | None:
        if value is None or value == "":
            return None
        return parse_timestamp(value)

    @field_validator("playbook_id", mode="before")
    @classmethod
    def _blank_playbook(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("rules_followed", "tags", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_closed(self) -> bool:
        return self.exit_price is not None


# ---------------------------------------------------------------------------
# Strategy / rules
# ---------------------------------------------------------------------------

class RuleItem(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    text: str


class RuleGroup(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str
    items: list[RuleItem] = Field(default_factory=list)


class Strategy(BaseModel):
    """A named trading plan with ordered rule groups."""

    model_config = _RECORD_CONFIG

    id: str
    name: str
    description: str = ""
    rules: list[RuleGroup] = Field(default_factory=list)
    color: str | None = None

    @field_validator("rules", mode="before")
    @classmethod
    def _null_rules(cls, value: Any) -> Any:
        return [] if value is None else value

    def rule_ids(self) -> list[str]:
        return [item.id for group in self.rules for item in group.items]


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class TagCategory(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str
    color: str = ""


class Tag(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str
    category_id: str


# ---------------------------------------------------------------------------
# User settings / date range
# ---------------------------------------------------------------------------

class UserSettings(BaseModel):
    model_config = _RECORD_CONFIG

    commission_per_unit: float = Field(default=0.0, ge=0.0)


class DateRange(BaseModel):
    """Inclusive calendar-day window.  ``None`` bounds are open."""

    model_config = _RECORD_CONFIG

    start_date: date | None = None
    end_date: date | None = None
    label: str = ""

    @model_validator(mode="after")
    def _ordered(self) -> DateRange:
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self

    @classmethod
    def all_time(cls) -> DateRange:
        return cls(label="All Time")

    @property
    def is_all_time(self) -> bool:
        return self.start_date is None and self.end_date is None

    def contains(self, day: date) -> bool:
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True
