# =============================================================================
# CropHealth Monitor Backend
# services/results.py - Stage Results
#
# Each analysis stage runs through run_stage(), which turns an exception
# into the stage's fallback value instead of unwinding into the caller.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """
    Outcome of one analysis stage.

    Either ok=True with the computed value, or ok=False with the stage's
    fallback value and the error message that caused the degradation.
    """
    value: T
    ok: bool = True
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return not self.ok


def run_stage(
    name: str,
    fn: Callable[..., T],
    fallback: Callable[[], T],
    *args: Any,
    **kwargs: Any
) -> StageResult[T]:
    """
    Run a stage function and degrade to its fallback on any error.

    Args:
        name: Stage name used in log messages
        fn: Stage function
        fallback: Zero-argument factory for the fallback value
        *args, **kwargs: Passed through to fn

    Returns:
        StageResult holding either fn's value or the fallback
    """
    try:
        return StageResult(fn(*args, **kwargs))
    except Exception as e:
        logger.warning(f"{name} stage failed, using fallback: {e}")
        return StageResult(fallback(), ok=False, error=str(e))
