"""
Configuration - Engine and service settings from the environment.

Environment variables:
    DETENTE_ENV              development | production
    DETENTE_SEED             seed for InternalRandom (unset: entropy)
    DETENTE_TURNS            last turn to play (default 10)
    DETENTE_LOG_LEVEL        logging level name (default INFO)
    DETENTE_ALLOWED_ORIGINS  comma separated CORS origins (default *)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field

DEFAULT_TURNS = 10


def _int_or_none(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class EngineConfig:
    env: str = "development"
    seed: int | None = None
    turns: int = DEFAULT_TURNS
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> EngineConfig:
        return cls(
            env=os.getenv("DETENTE_ENV", "development"),
            seed=_int_or_none(os.getenv("DETENTE_SEED")),
            turns=int(os.getenv("DETENTE_TURNS", str(DEFAULT_TURNS))),
            log_level=os.getenv("DETENTE_LOG_LEVEL", "INFO").upper(),
            allowed_origins=os.getenv("DETENTE_ALLOWED_ORIGINS", "*").split(","),
        )


def configure_logging(config: EngineConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
