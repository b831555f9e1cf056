# backend/livedash/settings.py
import os
from dataclasses import dataclass, field
from typing import List, Optional

from livedash.engine.config import DEFAULT_TICK_INTERVAL_MS
from livedash.engine.errors import ConfigurationError


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    seed: Optional[int] = None
    autostart: bool = True
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self) -> None:
        if self.tick_interval_ms <= 0:
            raise ConfigurationError(f"TICK_INTERVAL_MS must be positive, got {self.tick_interval_ms}")

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            tick_interval_ms=_env_int("TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS),
            seed=_env_int("SIM_SEED", None),
            autostart=os.getenv("SIM_AUTOSTART", "1") == "1",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
        )
