# missingkit/config/settings.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Settings                                                    ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Pydantic v2 Settings                                                  ║
║  ✓ Environment Variable / .env Support                                   ║
║  ✓ Validated Imputation Defaults                                         ║
╚════════════════════════════════════════════════════════════════════════════╝

Configuration Structure:
```
    Settings
    ├── Application (name, version)
    ├── Logging (level, format, rotation, paths)
    └── Imputation defaults (mode, indicator prefix, k neighbours)
```

Usage:
```python
    from missingkit.config.settings import settings

    print(settings.DEFAULT_IMPUTATION_TYPE)   # "standard"
    print(settings.DEFAULT_INDICATOR_PREFIX)  # "miss_"
```

Environment Variables:
    Every field can be overridden with an environment variable of the same
    (upper-case) name, e.g. ``KNN_NEIGHBORS=10`` or ``LOG_LEVEL=DEBUG``.

Dependencies:
    • pydantic
    • pydantic-settings
    • python-dotenv
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings", "get_settings"]


# Load environment variables
load_dotenv()


# ═══════════════════════════════════════════════════════════════════════════
# Settings Class
# ═══════════════════════════════════════════════════════════════════════════

class Settings(BaseSettings):
    """
    🔧 **Central Configuration**

    Type-safe configuration with Pydantic v2. Values come from (in order of
    precedence) environment variables, a ``.env`` file, then the defaults
    below.
    """

    # ───────────────────────────────────────────────────────────────────
    # Application
    # ───────────────────────────────────────────────────────────────────

    APP_NAME: str = "missingkit"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Logging configuration
    LOG_JSON_ENABLED: bool = False
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "30 days"
    LOG_CONSOLE_COMPACT: bool = False
    LOGS_PATH: Path = Field(default_factory=lambda: Path.cwd() / "logs")
    TEST_MODE: bool = False

    # ───────────────────────────────────────────────────────────────────
    # Imputation Defaults
    # ───────────────────────────────────────────────────────────────────

    DEFAULT_IMPUTATION_TYPE: Literal["standard", "knn"] = "standard"
    DEFAULT_INDICATOR_PREFIX: str = "miss_"
    KNN_NEIGHBORS: int = 5
    REPORT_TOP_N: int = 10

    # ───────────────────────────────────────────────────────────────────
    # Pydantic Configuration
    # ───────────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ───────────────────────────────────────────────────────────────────
    # Computed Fields
    # ───────────────────────────────────────────────────────────────────

    @computed_field
    @property
    def file_logging_enabled(self) -> bool:
        """File sinks are skipped in test mode."""
        return not self.TEST_MODE

    # ───────────────────────────────────────────────────────────────────
    # Field Validators
    # ───────────────────────────────────────────────────────────────────

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = (v or "").upper()

        if normalized not in allowed:
            raise ValueError(
                f"Invalid LOG_LEVEL '{v}'. "
                f"Allowed: {', '.join(sorted(allowed))}"
            )

        return normalized

    @field_validator("KNN_NEIGHBORS")
    @classmethod
    def validate_knn_neighbors(cls, v: int) -> int:
        """Validate neighbour count."""
        if v < 1:
            raise ValueError(f"KNN_NEIGHBORS must be >= 1, got {v}")
        return v

    @field_validator("REPORT_TOP_N")
    @classmethod
    def validate_report_top_n(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"REPORT_TOP_N must be >= 0, got {v}")
        return v

    @field_validator("DEFAULT_INDICATOR_PREFIX")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("DEFAULT_INDICATOR_PREFIX must be a non-empty string")
        return v


# ═══════════════════════════════════════════════════════════════════════════
# Global Instance
# ═══════════════════════════════════════════════════════════════════════════

settings = Settings()


def get_settings() -> Settings:
    """
    📋 **Get Settings Instance**

    Returns the global settings instance.
    """
    return settings
