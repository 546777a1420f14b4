"""Request and response models for the calculator HTTP surface.

Operands travel as text, exactly as typed into the calculator's input
fields, together with the base they should be read in.  Parsing them is
the engine's job (see ``bases.parse_number``), not the model's.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from alu import Operation
from bases import NumberBase


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class CalculationRequest(BaseModel):
    """One calculation as submitted from the calculator form."""

    operation: Operation
    a: str = Field(..., max_length=80, description="First operand text")
    b: str | None = Field(
        default=None,
        max_length=80,
        description="Second operand text; ignored for NOT",
    )
    base: NumberBase = NumberBase.DECIMAL

    @field_validator("operation", mode="before")
    @classmethod
    def operation_by_label_or_name(cls, v):
        # Accept "LEFT SHIFT" as well as "LEFT_SHIFT" and lower case.
        if isinstance(v, str) and not isinstance(v, Operation):
            label = v.strip().upper().replace("_", " ")
            return label
        return v


class ValidationRequest(BaseModel):
    text: str | None = Field(default=None, max_length=80)
    base: NumberBase = NumberBase.DECIMAL


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class OperationInfo(BaseModel):
    name: str
    label: str
    arity: int


class CalculationResponse(BaseModel):
    """Result of a calculation, rendered the ways the display shows it."""

    operation: Operation
    base: NumberBase
    result: int
    formatted: str
    binary: str
    hex: str
    entry: str


class ValidationResponse(BaseModel):
    valid: bool
    binary: str | None = None


class HistoryResponse(BaseModel):
    entries: list[str]


class StateResponse(BaseModel):
    result: int
    binary: str
