"""Runtime settings and logging setup.

Settings come from environment variables so the same app module can be
served by uvicorn without code changes:

    CALCULATOR_LOG_LEVEL     logging level name (default INFO)
    CALCULATOR_MAX_SESSIONS  upper bound on live sessions (default 1000)
    CALCULATOR_TITLE         API title shown in the OpenAPI docs
"""
from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    log_level: str = "INFO"
    max_sessions: int = Field(default=1000, ge=1)
    title: str = Field(default="Keypad Calculator API", min_length=1)

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        name = v.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return name

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field, var in (
            ("log_level", "CALCULATOR_LOG_LEVEL"),
            ("max_sessions", "CALCULATOR_MAX_SESSIONS"),
            ("title", "CALCULATOR_TITLE"),
        ):
            if var in env:
                values[field] = env[var]
        return cls.model_validate(values)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the `calculator` logger once."""
    logger = logging.getLogger("calculator")
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
