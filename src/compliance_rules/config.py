"""
Engine configuration for compliance rule evaluation.

This module defines the EngineConfig dataclass that captures the configurable
behaviour of the scheduling and folder engines, so callers never need to pass
loose flags around. Values can be overridden from the environment (or a .env
file) with COMPLIANCE_RULES_* variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

ENV_PREFIX = "COMPLIANCE_RULES_"

MONTH_FORMATS = {"name", "number"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for the rule engine.

    Attributes:
        allow_mixed_direction_tokens: Accept "T+n" and "D-n" interval tokens.
            When False, "T" must be used with "-" and "D" with "+".
        month_label_format: How {{month}} renders: "name" (January) or
            "number" (01).
        quarter_label_format: Format string for {{quarter}}; receives
            ``quarter`` and ``year`` keyword arguments.
        show_progress: Display tqdm progress bars during sweeps.
        log_level: Logging level applied by the sweep driver.
    """

    allow_mixed_direction_tokens: bool = False
    month_label_format: str = "name"
    quarter_label_format: str = "Q{quarter}-{year}"
    show_progress: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.month_label_format not in MONTH_FORMATS:
            raise ValueError(
                f"month_label_format must be one of {sorted(MONTH_FORMATS)}, "
                f"got {self.month_label_format!r}"
            )
        if "{quarter}" not in self.quarter_label_format:
            raise ValueError("quarter_label_format must contain '{quarter}'")
        try:
            self.quarter_label_format.format(quarter=1, year=2000)
        except (AttributeError, KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                f"quarter_label_format may only use {{quarter}} and {{year}}, "
                f"got {self.quarter_label_format!r}"
            ) from exc
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "EngineConfig":
        """
        Build a configuration from environment variables.

        A .env file is loaded first (without overriding variables that are
        already set). Unset variables keep their defaults.

        Args:
            dotenv_path: Explicit .env file. If None, python-dotenv searches
                from the current directory upwards.

        Returns:
            EngineConfig with environment overrides applied.
        """
        load_dotenv(dotenv_path=dotenv_path, override=False)
        defaults = cls()
        return cls(
            allow_mixed_direction_tokens=_env_bool(
                "ALLOW_MIXED_TOKENS", defaults.allow_mixed_direction_tokens
            ),
            month_label_format=os.getenv(
                f"{ENV_PREFIX}MONTH_FORMAT", defaults.month_label_format
            ).strip().lower(),
            quarter_label_format=os.getenv(
                f"{ENV_PREFIX}QUARTER_FORMAT", defaults.quarter_label_format
            ),
            show_progress=_env_bool("SHOW_PROGRESS", defaults.show_progress),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).strip().upper(),
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


DEFAULT_CONFIG = EngineConfig()


__all__ = ["EngineConfig", "DEFAULT_CONFIG", "ENV_PREFIX"]
