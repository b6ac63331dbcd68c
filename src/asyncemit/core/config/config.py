"""
Static configuration for asyncemit.

Purpose
-------
Provides centralized configuration loaded from environment variables with
sensible defaults and type validation. Covers the ambient settings of the
package (logging output and metrics collection); the emitter itself has no
tunable delivery semantics.

Responsibilities
----------------
- Load configuration from environment variables, optionally from a .env file
- Provide type-safe access to all configuration values
- Fall back to documented defaults on missing or malformed values
- Track which values came from the environment versus defaults

Non-Responsibilities
--------------------
- Creating the logs directory (done by the logging subsystem on demand)
- Per-emitter options (passed to the Emitter constructor)

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Loaded once on module import via Config.load(), from the process
  environment only; a .env file is read only when the host asks for it with
  Config.load(load_env_file=True) or Config.reload(load_env_file=True)
- Config.reload() re-reads the environment (used by tests and hosts that
  change variables at runtime)

Environment Variables
---------------------
- ASYNCEMIT_ENV: Environment type (default: development)
- ASYNCEMIT_LOG_LEVEL: Logging level (default: INFO)
- ASYNCEMIT_LOG_JSON: Force JSON console output (default: JSON in production)
- ASYNCEMIT_LOG_COLORS: Colored console output in dev TTYs (default: true)
- ASYNCEMIT_LOG_FILE: Add a rotating JSON file handler (default: false)
- ASYNCEMIT_LOGS_DIR: Directory for the file handler (default: ./logs)
- ASYNCEMIT_LOG_QUEUE_SIZE: Bounded logging queue size (default: 10000)
- ASYNCEMIT_METRICS_ENABLED: Default metrics toggle for new emitters (default: true)

Dependencies
------------
- python-dotenv: Environment variable loading
- pathlib: Cross-platform path handling
- logging: Basic logging (bootstrap only)
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "ASYNCEMIT_"


# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger is not set up during bootstrap.
            logging.warning(
                f"Unknown environment '{value}', defaulting to development"
            )
            return cls.DEVELOPMENT


# ============================================================================
# Configuration Metrics Tracker
# ============================================================================


class _ConfigLoadMetrics:
    """
    Internal metrics tracker for configuration loading.

    Tracks which configuration values came from environment variables
    versus defaults, and any validation errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, default: Any):
        self.env_vars_loaded[key] = from_env
        if from_env:
            self.defaults_used.pop(key, None)
        else:
            self.defaults_used[key] = default

    def record_validation_error(self, key: str, error: str):
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration loading summary."""
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for asyncemit.

    Usage
    -----
    >>> Config.LOG_LEVEL
    'INFO'
    >>> Config.is_production()
    False
    >>> summary = Config.get_config_summary()
    """

    _metrics: Optional[_ConfigLoadMetrics] = None

    # =========================================================================
    # Environment
    # =========================================================================

    ENVIRONMENT: str = Environment.DEVELOPMENT.value

    # =========================================================================
    # Logging
    # =========================================================================

    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True
    LOG_FILE: bool = False
    LOGS_DIR: Path = Path("logs")
    LOG_QUEUE_SIZE: int = 10_000

    # =========================================================================
    # Emitter Defaults
    # =========================================================================

    METRICS_ENABLED: bool = True

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        if cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _record_invalid(cls, key: str, error: str) -> None:
        logging.warning(error)
        if cls._metrics:
            cls._metrics.record_validation_error(key, error)

    @classmethod
    def _safe_int(
        cls,
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        """
        Safely parse integer from environment with validation.

        Parameters
        ----------
        key:
            Environment variable name without the ASYNCEMIT_ prefix.
        default:
            Default value if not set or invalid.
        min_val:
            Minimum allowed value (inclusive).
        max_val:
            Maximum allowed value (inclusive).

        Returns
        -------
        int
            Validated integer value.

        Example
        -------
        >>> Config._safe_int("LOG_QUEUE_SIZE", 10_000, min_val=1)
        10000
        """
        cls._init_metrics()
        env_key = ENV_PREFIX + key
        raw_value = os.getenv(env_key)

        if raw_value is None:
            cls._metrics.record_env_load(env_key, False, default)
            return default

        try:
            value = int(raw_value)
        except ValueError:
            cls._record_invalid(
                env_key,
                f"{env_key}='{raw_value}' is not a valid integer, using default {default}",
            )
            return default

        if min_val is not None and value < min_val:
            cls._record_invalid(
                env_key,
                f"{env_key}={value} is below minimum {min_val}, using default {default}",
            )
            return default

        if max_val is not None and value > max_val:
            cls._record_invalid(
                env_key,
                f"{env_key}={value} exceeds maximum {max_val}, using default {default}",
            )
            return default

        cls._metrics.record_env_load(env_key, True, default)
        return value

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        """
        cls._init_metrics()
        env_key = ENV_PREFIX + key
        raw_value = os.getenv(env_key)

        if raw_value is None:
            cls._metrics.record_env_load(env_key, False, default)
            return default

        normalized = raw_value.lower().strip()

        if normalized in {"true", "yes", "1", "on"}:
            value = True
        elif normalized in {"false", "no", "0", "off"}:
            value = False
        else:
            cls._record_invalid(
                env_key,
                f"{env_key}='{raw_value}' is not a valid boolean, using default {default}",
            )
            return default

        cls._metrics.record_env_load(env_key, True, default)
        return value

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        cls._init_metrics()
        env_key = ENV_PREFIX + key
        value = os.getenv(env_key, default)
        cls._metrics.record_env_load(env_key, env_key in os.environ, default)
        return value

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(
        cls, load_env_file: bool = False, dotenv_path: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Load all configuration from environment variables.

        Called automatically on module import with the defaults, which leave
        the process environment untouched.

        Parameters
        ----------
        load_env_file:
            If True, first merge a .env file into os.environ with
            python-dotenv. Variables already set are not overridden.
        dotenv_path:
            Explicit .env location. Defaults to the nearest .env found
            upward from the current working directory.
        """
        if load_env_file:
            load_dotenv(dotenv_path or find_dotenv(usecwd=True))

        cls._init_metrics()

        cls.ENVIRONMENT = Environment.from_string(
            cls._safe_str("ENV", Environment.DEVELOPMENT.value)
        ).value

        log_level = cls._safe_str("LOG_LEVEL", "INFO").upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            cls._record_invalid(
                ENV_PREFIX + "LOG_LEVEL",
                f"Invalid {ENV_PREFIX}LOG_LEVEL '{log_level}', using INFO",
            )
            log_level = "INFO"
        cls.LOG_LEVEL = log_level

        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_COLORS = bool(cls._safe_bool("LOG_COLORS", True))
        cls.LOG_FILE = bool(cls._safe_bool("LOG_FILE", False))
        cls.LOGS_DIR = Path(cls._safe_str("LOGS_DIR", "logs"))
        cls.LOG_QUEUE_SIZE = cls._safe_int(
            "LOG_QUEUE_SIZE", 10_000, min_val=1, max_val=1_000_000
        )

        cls.METRICS_ENABLED = bool(cls._safe_bool("METRICS_ENABLED", True))

        cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    @classmethod
    def reload(
        cls, load_env_file: bool = False, dotenv_path: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Re-read all values from the environment.

        Example
        -------
        >>> os.environ["ASYNCEMIT_LOG_LEVEL"] = "DEBUG"
        >>> Config.reload()
        >>> Config.LOG_LEVEL
        'DEBUG'
        """
        cls._metrics = None
        cls.load(load_env_file=load_env_file, dotenv_path=dotenv_path)

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT == Environment.PRODUCTION.value

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == Environment.DEVELOPMENT.value

    @classmethod
    def is_testing(cls) -> bool:
        return cls.ENVIRONMENT == Environment.TESTING.value

    # =========================================================================
    # Metrics & Summary
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """
        Get configuration summary for debugging.

        Example
        -------
        >>> Config.get_config_summary()["environment"]
        'development'
        """
        return {
            "environment": cls.ENVIRONMENT,
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "log_colors": cls.LOG_COLORS,
            "log_file": cls.LOG_FILE,
            "logs_dir": str(cls.LOGS_DIR),
            "log_queue_size": cls.LOG_QUEUE_SIZE,
            "metrics_enabled": cls.METRICS_ENABLED,
        }


Config.load()
