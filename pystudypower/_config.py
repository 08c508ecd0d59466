"""Session configuration: defaults for the global prompts and the export directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_ENV_PREFIX = "PYSTUDYPOWER_"


def _parse(env, name, convert):
    raw = env[_ENV_PREFIX + name]
    try:
        return convert(raw)
    except ValueError:
        raise ValueError(f"{_ENV_PREFIX}{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class SessionConfig:
    """Process-wide settings, fixed before a session starts.

    Attributes
    ----------
    output_dir : Path
        Directory that receives the sweep graph of each session.
    default_alpha : float
        Significance level used when the operator leaves the prompt blank.
    default_power : float
        Power target used when the operator leaves the prompt blank.
    dpi : int
        Resolution of the exported graph.
    log_level : str
        Level name passed to ``logging.basicConfig`` by the CLI.
    """

    output_dir: Path = Path("power_output")
    default_alpha: float = 0.05
    default_power: float = 0.80
    dpi: int = 150
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not (0.0 < self.default_alpha < 1.0):
            raise ValueError(f"default_alpha must be in (0, 1), got {self.default_alpha}")
        if not (0.0 < self.default_power < 1.0):
            raise ValueError(f"default_power must be in (0, 1), got {self.default_power}")
        if self.default_power <= self.default_alpha:
            raise ValueError("default_power must exceed default_alpha")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level {self.log_level!r}")
        object.__setattr__(self, "output_dir", Path(self.output_dir))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SessionConfig:
        """Build a config from ``PYSTUDYPOWER_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        if f"{_ENV_PREFIX}OUTPUT_DIR" in env:
            kwargs["output_dir"] = Path(env[f"{_ENV_PREFIX}OUTPUT_DIR"])
        if f"{_ENV_PREFIX}ALPHA" in env:
            kwargs["default_alpha"] = _parse(env, "ALPHA", float)
        if f"{_ENV_PREFIX}POWER" in env:
            kwargs["default_power"] = _parse(env, "POWER", float)
        if f"{_ENV_PREFIX}DPI" in env:
            kwargs["dpi"] = _parse(env, "DPI", int)
        if f"{_ENV_PREFIX}LOG_LEVEL" in env:
            kwargs["log_level"] = env[f"{_ENV_PREFIX}LOG_LEVEL"]
        return cls(**kwargs)

    def prepare_output_dir(self) -> Path:
        """Create the export directory once, before the session begins."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Output directory ready: %s", self.output_dir)
        return self.output_dir
