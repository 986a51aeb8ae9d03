"""Fare domain model."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FareType(Enum):
    ADULT = "adult"
    CHILD = "child"
    YOUTH = "youth"
    STUDENT = "student"
    MILITARY = "military"
    SENIOR = "senior"
    DISABLED = "disabled"
    BIKE = "bike"


class Fare(BaseModel):
    """A price offered for a trip."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: FareType
    currency: str = Field(min_length=3, max_length=3)
    amount: Decimal
    units_name: str | None = None
    units: str | None = None
