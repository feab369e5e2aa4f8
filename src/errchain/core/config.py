"""
errchain Configuration Module

Wire-format and rendering constants, plus the instance-based runtime
configuration used by the CLI.

The constants are fixed for the lifetime of the process: every encoder and
decoder in the package reads them, and changing one changes the wire format.
"""

import logging
import os
from dataclasses import dataclass

# =============================================================================
# Rendering
# =============================================================================

# Joins nodes in ``str(node)``; the tab marks one level of chain depth.
DISPLAY_SEPARATOR = "\n\t"
# Joins nodes in ``ErrorNode.as_log_line()``.
LOG_SEPARATOR = "; "
LOCATION_PREFIX = "@ "
LOCATION_SUFFIX = "; "

# =============================================================================
# DSV text encoding
# =============================================================================

# ASCII Unit Separator and Record Separator.  Payload text must not contain them.
UNIT_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
KIND_WIDTH = 3

# =============================================================================
# Binary encoding
# =============================================================================

# A 64-bit value needs at most ten 7-bit groups.
MAX_VARINT_BYTES = 10
KIND_MIN = -(1 << 63)
KIND_MAX = (1 << 63) - 1


# =============================================================================
# Instance-Based Configuration
# =============================================================================

@dataclass
class ErrchainConfig:
    """
    Runtime settings for applications embedding errchain.

    The library never configures logging on import; the CLI (or your
    application) builds one of these and applies it::

        config = ErrchainConfig.from_env()
        config.validate()
        logging.basicConfig(level=config.level, format=config.log_format)
    """

    # ── Logging ───────────────────────────────────────────────────
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ── Factory ───────────────────────────────────────────────────

    @classmethod
    def from_env(cls) -> "ErrchainConfig":
        """Build a config snapshot from :envvar:`ERRCHAIN_LOG_LEVEL` and
        :envvar:`ERRCHAIN_LOG_FORMAT`."""
        return cls(
            log_level=os.getenv("ERRCHAIN_LOG_LEVEL", "WARNING").upper(),
            log_format=os.getenv("ERRCHAIN_LOG_FORMAT", cls.log_format),
        )

    # ── Validation & Accessors ────────────────────────────────────

    def validate(self) -> bool:
        """Raise :class:`~errchain.exceptions.ConfigError` for an unknown log level."""
        from errchain.exceptions import ConfigError

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(
                f"Unknown log level '{self.log_level}'. "
                "Supported: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n"
                "  Set via: export ERRCHAIN_LOG_LEVEL=INFO"
            )
        return True

    @property
    def level(self) -> int:
        """Numeric logging level for :func:`logging.basicConfig`."""
        return getattr(logging, self.log_level.upper())
