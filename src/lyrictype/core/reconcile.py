"""Reconciliation between typing progress and the playback-driven active line."""

from typing import Optional

from ..config import SyncConfig
from ..utils.logging import get_logger
from .models import (
    ForceAdvance,
    LyricSequence,
    NoAction,
    ReconcileAction,
    SignalStall,
)

logger = get_logger(__name__)


def reconcile(
    sequence: LyricSequence,
    active_index: int,
    typed_position: int,
    elapsed_playback: float,
    stalled_for: float = 0.0,
    config: Optional[SyncConfig] = None,
) -> ReconcileAction:
    """Decide how to bring typing back in line with the music.

    - No sync for longer than the stall timeout: ``SignalStall``.
    - User more than ``catch_up_threshold`` characters behind the active
      line after the grace period: ``ForceAdvance`` to a few characters
      before that line.
    - Otherwise (in sync, ahead, or no active line): ``NoAction``.
    """
    config = config or SyncConfig()

    if active_index < 0 or active_index >= len(sequence):
        if stalled_for > config.stall_timeout:
            return SignalStall()
        return NoAction()

    line_offset = sequence.offset_of(active_index)
    behind_by = line_offset - typed_position
    if behind_by > config.catch_up_threshold and elapsed_playback > config.grace_period:
        to_position = max(0, line_offset - config.catch_up_lead)
        logger.debug(
            f"Typing {behind_by} chars behind line {active_index}; "
            f"advancing to {to_position}"
        )
        return ForceAdvance(to_position=to_position)

    return NoAction()


def advance_buffer(
    sequence: LyricSequence, typed: str, to_position: int
) -> str:
    """Build the typed buffer after a forced advance.

    Text the user typed for lines finished before the line they were on is
    kept; the rest up to ``to_position`` is taken from the target, so partial
    progress on skipped lines is discarded.
    """
    target = sequence.text
    to_position = max(0, min(to_position, len(target)))
    if len(typed) >= to_position:
        return typed

    current_line = sequence.line_at_position(len(typed))
    keep = sequence.offset_of(current_line) if current_line >= 0 else 0
    keep = min(keep, len(typed))
    return typed[:keep] + target[keep:to_position]
