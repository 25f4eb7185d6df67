"""Zero-evidence fallback policy.

Every external judgment call goes through :func:`gather_evidence`, and
every detector's entry point is wrapped in :func:`detector_boundary`.
Failures are logged once and counted where they are substituted, so a
"nothing found" verdict can be told apart from a failed one.

Only ``Exception`` is caught: ``asyncio.CancelledError`` propagates and a
cancelled run produces no result at all.
"""

import functools
import math
import re
from typing import Any, Awaitable, Callable, TypeVar

from .errors import DetectorFailure, MalformedSegment
from .similarity import clamp
from .utils.logging import get_logger
from .utils.metrics import get_operation_metrics

logger = get_logger("evidence")

T = TypeVar("T")

_LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


async def gather_evidence(call: Callable[[], Awaitable[T]], fallback: T, source: str) -> T:
    """Run an external call, substituting ``fallback`` on failure.

    The call is made inside the guard, so a judge that raises before
    returning an awaitable is treated like one that fails when awaited.

    Args:
        call: Zero-argument callable returning the external judgment awaitable
        fallback: Zero-evidence value returned on failure
        source: Name of the call site for logs and metrics

    Returns:
        The call's result or the fallback
    """
    try:
        return await call()
    except Exception as e:
        metrics = get_operation_metrics()
        metrics.increment("evidence_unavailable")
        metrics.record_error(type(e).__name__)
        logger.warning(
            f"Evidence unavailable from {source}, substituting zero evidence: "
            f"{type(e).__name__}: {str(e)[:200]}",
            extra={"evidence_source": source},
        )
        return fallback


def detector_boundary(
    name: str, fallback_factory: Callable[[], T]
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate an async detector entry point with the failure policy.

    Any exception escaping the wrapped coroutine is logged as a
    :class:`DetectorFailure` and replaced by ``fallback_factory()``.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                failure = DetectorFailure(name, e)
                metrics = get_operation_metrics()
                metrics.increment("detector_failure")
                metrics.record_error(type(e).__name__)
                logger.error(
                    f"{failure}; returning zero-evidence result",
                    exc_info=e,
                    extra={"evidence_source": name},
                )
                return fallback_factory()

        return wrapper

    return decorator


def coerce_probability(raw: object) -> float:
    """Parse a judgment answer as a probability clamped to [0, 1].

    Accepts numbers, and strings that start with a number: the leading
    numeric prefix is used and anything after it ignored, so
    ``"0.85 (likely AI)"`` reads as 0.85.

    Raises:
        MalformedSegment: If the value is missing, non-numeric or NaN
    """
    if isinstance(raw, bool) or raw is None:
        raise MalformedSegment(raw)
    if isinstance(raw, str):
        match = _LEADING_NUMBER.match(raw)
        if match is None:
            raise MalformedSegment(raw)
        value = float(match.group())
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError) as e:
            raise MalformedSegment(raw) from e
    if math.isnan(value):
        raise MalformedSegment(raw)
    if not 0.0 <= value <= 1.0:
        logger.debug(f"Clamping out-of-range probability {value}")
    return clamp(value)
