"""
Configuration - Environment-driven settings.

    HEATDUEL_ENV              deployment name (default: development)
    HEATDUEL_TURN_DELAY       seconds between the end of a turn and the next start (default: 1.0)
    HEATDUEL_MAX_AUTO_TURNS   safety limit for bot-driven loops (default: 50)
    HEATDUEL_LOG_LEVEL        logging level name (default: INFO)
    ALLOWED_ORIGINS           comma-separated CORS origins (default: *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping
import os

from .engine_core.duel import DEFAULT_TURN_DELAY


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    turn_delay: float = DEFAULT_TURN_DELAY
    max_auto_turns: int = 50
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from the environment (or the given mapping)."""
        environ = os.environ if environ is None else environ
        return cls(
            env=environ.get("HEATDUEL_ENV", "development"),
            turn_delay=float(environ.get("HEATDUEL_TURN_DELAY", DEFAULT_TURN_DELAY)),
            max_auto_turns=int(environ.get("HEATDUEL_MAX_AUTO_TURNS", 50)),
            log_level=environ.get("HEATDUEL_LOG_LEVEL", "INFO").upper(),
            allowed_origins=[
                origin.strip()
                for origin in environ.get("ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
        )
