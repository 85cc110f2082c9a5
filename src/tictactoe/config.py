"""Runtime settings for the Tic-Tac-Toe service, read from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .ai import Difficulty

ENV_PREFIX = "TICTACTOE_"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _parse_delay(raw: str) -> Tuple[float, float]:
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if len(parts) == 1:
        low = high = float(parts[0])
    elif len(parts) == 2:
        low, high = float(parts[0]), float(parts[1])
    else:
        raise ValueError("expected one value or 'min,max'")
    if not (math.isfinite(low) and math.isfinite(high)):
        raise ValueError("delay bounds must be finite")
    if low < 0 or high < low:
        raise ValueError("delay bounds must satisfy 0 <= min <= max")
    return low, high


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # (min, max) seconds the computer "thinks" before moving
    think_delay: Tuple[float, float] = (0.12, 0.12)
    default_difficulty: Difficulty = Difficulty.HARD

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls()

        def get(name: str) -> Optional[str]:
            return env.get(ENV_PREFIX + name)

        if get("HOST"):
            settings.host = get("HOST")  # type: ignore[assignment]

        raw = get("PORT")
        if raw:
            try:
                settings.port = int(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {raw!r}") from exc
            if not 0 < settings.port < 65536:
                raise ValueError(f"{ENV_PREFIX}PORT out of range: {settings.port}")

        raw = get("LOG_LEVEL")
        if raw:
            level = raw.strip().upper()
            if level not in LOG_LEVELS:
                raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {raw!r}")
            settings.log_level = level

        raw = get("THINK_DELAY")
        if raw:
            try:
                settings.think_delay = _parse_delay(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}THINK_DELAY is invalid: {exc}") from exc

        raw = get("DIFFICULTY")
        if raw:
            try:
                settings.default_difficulty = Difficulty(raw.strip().lower())
            except ValueError as exc:
                choices = ", ".join(d.value for d in Difficulty)
                raise ValueError(
                    f"{ENV_PREFIX}DIFFICULTY must be one of {choices}, got {raw!r}"
                ) from exc

        return settings
