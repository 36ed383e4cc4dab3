"""Configuration settings for LyricType."""

import math
import os
from dataclasses import dataclass

from .exceptions import ConfigError


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


# Parser timing
DEFAULT_LINE_SPACING = 4.0  # Seconds between lines that carry no timestamp
LONG_CLOSING_LINE_DURATION = 4.0
SHORT_CLOSING_LINE_DURATION = 1.0
SHORT_LINE_MAX_CHARS = 10  # Closing lines up to this length get the short window
LINE_ORDER_NUDGE = 0.01

# Timing normalizer (can be overridden via environment variables)
START_OFFSET = _env_float("LYRICTYPE_START_OFFSET", "3.0")
END_OFFSET = _env_float("LYRICTYPE_END_OFFSET", "3.0")
PHRASE_GAP = 0.5  # Pause inserted after lines ending in . ! ?

# Synchronizer look-ahead windows
GAP_LOOKAHEAD = _env_float("LYRICTYPE_GAP_LOOKAHEAD", "0.5")
INTRO_LOOKAHEAD = _env_float("LYRICTYPE_INTRO_LOOKAHEAD", "2.0")

# Reconciliation
CATCH_UP_THRESHOLD = _env_int("LYRICTYPE_CATCH_UP_THRESHOLD", "20")  # characters
CATCH_UP_LEAD = _env_int("LYRICTYPE_CATCH_UP_LEAD", "3")  # characters before line start
GRACE_PERIOD = _env_float("LYRICTYPE_GRACE_PERIOD", "5.0")  # seconds of playback
STALL_TIMEOUT = _env_float("LYRICTYPE_STALL_TIMEOUT", "2.0")

# Typing stats
CHARS_PER_WORD = 5
HIGH_SCORE_LIMIT = 10


@dataclass(frozen=True)
class SyncConfig:
    """Tunable thresholds shared by the synchronizer and reconciliation policy."""

    gap_lookahead: float = GAP_LOOKAHEAD
    intro_lookahead: float = INTRO_LOOKAHEAD
    catch_up_threshold: int = CATCH_UP_THRESHOLD
    catch_up_lead: int = CATCH_UP_LEAD
    grace_period: float = GRACE_PERIOD
    stall_timeout: float = STALL_TIMEOUT
    start_offset: float = START_OFFSET
    end_offset: float = END_OFFSET

    def __post_init__(self):
        validate_sync_config(self)

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Build a config from the current environment, ignoring import-time values."""
        return cls(
            gap_lookahead=_env_float("LYRICTYPE_GAP_LOOKAHEAD", "0.5"),
            intro_lookahead=_env_float("LYRICTYPE_INTRO_LOOKAHEAD", "2.0"),
            catch_up_threshold=_env_int("LYRICTYPE_CATCH_UP_THRESHOLD", "20"),
            catch_up_lead=_env_int("LYRICTYPE_CATCH_UP_LEAD", "3"),
            grace_period=_env_float("LYRICTYPE_GRACE_PERIOD", "5.0"),
            stall_timeout=_env_float("LYRICTYPE_STALL_TIMEOUT", "2.0"),
            start_offset=_env_float("LYRICTYPE_START_OFFSET", "3.0"),
            end_offset=_env_float("LYRICTYPE_END_OFFSET", "3.0"),
        )


def validate_sync_config(config: SyncConfig) -> None:
    """Validate configuration values."""
    if config.gap_lookahead < 0 or config.intro_lookahead < 0:
        raise ConfigError("Look-ahead windows must be non-negative")

    if config.catch_up_threshold < 0 or config.catch_up_lead < 0:
        raise ConfigError("Catch-up threshold and lead must be non-negative")

    if config.catch_up_lead > config.catch_up_threshold:
        raise ConfigError("Catch-up lead cannot exceed the catch-up threshold")

    if config.grace_period < 0:
        raise ConfigError("Invalid grace period")

    if config.stall_timeout <= 0:
        raise ConfigError("Stall timeout must be positive")

    for name in ("start_offset", "end_offset"):
        value = getattr(config, name)
        if not math.isfinite(value) or value < 0:
            raise ConfigError(f"{name} must be a non-negative number of seconds, got {value}")


def validate_config() -> None:
    """Validate module-level configuration values."""
    validate_sync_config(SyncConfig())


# Validate config on import
validate_config()
