"""
Configuration for the tiny-qreg engine, listener and renderers.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from tiny_qreg.logging_config import resolve_level

MAX_QUBITS = 16

_ENV_PREFIX = "TINY_QREG_"


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by the engine and the components built on it."""

    # Register
    num_qubits: int = 3
    epsilon: float = 1e-12  # normalisation floor
    renormalize_every: int = 0  # 0 = only when the caller asks

    # Listener
    host: str = "127.0.0.1"
    port: int = 8080

    # Renderers
    led_count: int = 8
    display_width: int = 16
    display_height: int = 2

    log_level: str = "INFO"

    def __post_init__(self):
        if not 1 <= self.num_qubits <= MAX_QUBITS:
            raise ValueError(
                f"num_qubits must be in [1, {MAX_QUBITS}], got {self.num_qubits}"
            )
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be >= 0, got {self.epsilon}")
        if self.renormalize_every < 0:
            raise ValueError(
                f"renormalize_every must be >= 0, got {self.renormalize_every}"
            )
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port must be in [0, 65535], got {self.port}")
        if self.led_count < 1:
            raise ValueError(f"led_count must be >= 1, got {self.led_count}")
        if self.display_width < 1 or self.display_height < 1:
            raise ValueError(
                "display must be at least 1x1, got "
                f"{self.display_width}x{self.display_height}"
            )
        try:
            resolve_level(self.log_level)
        except ValueError as e:
            raise ValueError(f"log_level: {e}") from e

    def with_overrides(self, **changes) -> "EngineConfig":
        """Return a copy with ``changes`` applied, ignoring None values."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a config from ``TINY_QREG_*`` environment variables.

        Unset variables keep their defaults. Unparsable values raise
        ValueError naming the variable.
        """
        if environ is None:
            environ = os.environ

        fields = {
            "num_qubits": ("QUBITS", int),
            "epsilon": ("EPSILON", float),
            "renormalize_every": ("RENORMALIZE_EVERY", int),
            "host": ("HOST", str),
            "port": ("PORT", int),
            "led_count": ("LED_COUNT", int),
            "display_width": ("DISPLAY_WIDTH", int),
            "display_height": ("DISPLAY_HEIGHT", int),
            "log_level": ("LOG_LEVEL", str.upper),
        }
        values = {}
        for name, (suffix, convert) in fields.items():
            key = _ENV_PREFIX + suffix
            raw = environ.get(key)
            if raw is None or raw == "":
                continue
            try:
                values[name] = convert(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e
        return cls(**values)


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
