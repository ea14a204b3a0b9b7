"""Runtime settings for formrules tooling."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Settings read from the environment.

    Attributes:
        log_level: Logging level name for the CLI (FORMRULES_LOG_LEVEL)
        extended_rules: Register the extended rule pack (FORMRULES_EXTENDED_RULES)
    """

    log_level: str = "WARNING"
    extended_rules: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from environment variables, falling back to defaults."""
        level = os.environ.get("FORMRULES_LOG_LEVEL", "WARNING").strip().upper()
        extended = os.environ.get("FORMRULES_EXTENDED_RULES", "").strip().lower()
        return cls(
            log_level=level or "WARNING",
            extended_rules=extended in _TRUE_VALUES,
        )

    @property
    def numeric_log_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=self.numeric_log_level,
            format="%(levelname)s %(name)s: %(message)s",
        )
