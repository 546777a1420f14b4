"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from alu import ALUEngine, ChangeEvent
from api import router, set_engine
from config import EngineConfig

logger = logging.getLogger(__name__)


def _log_change(event: ChangeEvent) -> None:
    logger.debug("%s changed: %r", event.property_name, event.new_value)


def create_app(
    engine: ALUEngine | None = None,
    config: EngineConfig | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional engine for testing; otherwise one is built from
    ``config`` (or the environment when no config is given).
    """
    if config is None:
        config = EngineConfig.from_env()
    logging.basicConfig(level=config.log_level.upper())

    if engine is None:
        engine = ALUEngine.from_config(config)
    engine.subscribe(_log_change)

    set_engine(engine)

    app = FastAPI(
        title="ALU Calculator API",
        description=(
            "Fixed-width integer ALU: arithmetic, bitwise and shift "
            "operations on 32-bit signed words, with decimal, binary and "
            "hexadecimal input and output and a history of the ten most "
            "recent calculations."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
