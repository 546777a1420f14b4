"""Engine configuration.

Defaults reproduce the desktop calculator: a 32-bit word and the ten
most recent calculations.  Each field can be overridden from the
environment with the ``ALU_`` prefix.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from history import HISTORY_CAPACITY


@dataclass(frozen=True)
class EngineConfig:
    history_capacity: int = HISTORY_CAPACITY
    word_bits: int = 32
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise ValueError(
                f"history_capacity ({self.history_capacity}) must be >= 1"
            )
        if not 2 <= self.word_bits <= 64:
            raise ValueError(f"word_bits ({self.word_bits}) must be in [2, 64]")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls) -> EngineConfig:
        return cls(
            history_capacity=int(
                os.getenv("ALU_HISTORY_CAPACITY", str(HISTORY_CAPACITY))
            ),
            word_bits=int(os.getenv("ALU_WORD_BITS", "32")),
            log_level=os.getenv("ALU_LOG_LEVEL", "INFO"),
        )
