"""FastAPI endpoints for the calculator.

Routes
------
GET    /operations     List operations with their arity
POST   /calculate      Parse operands in a base, execute and record
POST   /validate       Check one input field and preview its binary form
GET    /history        Recorded calculations, newest first
DELETE /history        Clear the history
GET    /state          Last result and its 32-bit binary form
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from alu import ALUEngine, Operation
from bases import (
    binary_preview,
    format_binary_grouped,
    format_number,
    parse_number,
    to_hex_string,
)
from errors import ALUError, ParseError
from models import (
    CalculationRequest,
    CalculationResponse,
    HistoryResponse,
    OperationInfo,
    StateResponse,
    ValidationRequest,
    ValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["alu"])

# The engine instance is injected by the app factory (see app.py).
_engine: ALUEngine | None = None


def set_engine(engine: ALUEngine) -> None:
    """Inject the engine instance. Called once at app startup."""
    global _engine
    _engine = engine


def get_engine() -> ALUEngine:
    assert _engine is not None, "Engine not initialized"
    return _engine


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_operand(engine: ALUEngine, text: str | None, req: CalculationRequest,
                   field_name: str) -> int:
    try:
        return parse_number(text, req.base, engine.bounds)
    except ParseError as e:
        logger.info("Rejected %s for %s: %s", field_name, req.operation.label, e)
        raise HTTPException(
            status_code=422,
            detail=f"Please enter a valid number for {field_name}",
        ) from e


def _arithmetic_error(e: ALUError) -> HTTPException:
    return HTTPException(status_code=400, detail=f"Arithmetic error: {e}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/operations", response_model=list[OperationInfo])
def list_operations() -> list[OperationInfo]:
    """List the operations the engine supports."""
    return [
        OperationInfo(name=op.name, label=op.label, arity=op.arity)
        for op in Operation
    ]


@router.post("/calculate", response_model=CalculationResponse)
def calculate(req: CalculationRequest) -> CalculationResponse:
    """Execute one calculation and append it to the history."""
    engine = get_engine()
    a = _parse_operand(engine, req.a, req, "Input 1")
    b = None
    if req.operation.arity == 2:
        b = _parse_operand(engine, req.b, req, "Input 2")

    try:
        result, entry = engine.perform(req.operation, a, b, req.base)
    except ALUError as e:
        raise _arithmetic_error(e) from e

    return CalculationResponse(
        operation=req.operation,
        base=req.base,
        result=result,
        formatted=format_number(result, req.base, engine.bounds),
        binary=format_binary_grouped(result, engine.bounds),
        hex=to_hex_string(result, engine.bounds),
        entry=entry,
    )


@router.post("/validate", response_model=ValidationResponse)
def validate(req: ValidationRequest) -> ValidationResponse:
    """Validate one input field's text in the selected base."""
    engine = get_engine()
    preview = binary_preview(req.text, req.base, engine.bounds)
    return ValidationResponse(valid=preview is not None, binary=preview)


@router.get("/history", response_model=HistoryResponse)
def get_history() -> HistoryResponse:
    """Recorded calculations, most recent first."""
    return HistoryResponse(entries=get_engine().recent_history())


@router.delete("/history", response_model=HistoryResponse)
def clear_history() -> HistoryResponse:
    engine = get_engine()
    engine.clear_history()
    return HistoryResponse(entries=[])


@router.get("/state", response_model=StateResponse)
def get_state() -> StateResponse:
    result, binary = get_engine().state()
    return StateResponse(result=result, binary=binary)
