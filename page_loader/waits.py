# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Cooperative polling used for explicit waits on page and element state.
# Every wait is bounded by a caller-supplied deadline and poll interval and
# runs entirely inside the calling thread.
#
# Key Features:
#   - Fixed-interval polling with a hard deadline
#   - Named wait scenarios, overridable from config.yaml
#   - Last observed failure reported on timeout
#   - Allure integration for step reporting
#
# Usage:
#   wait_until(lambda: proxy.is_present(), timeout=5, poll_interval=0.1)
#   wait_until(check, config=get_wait_config("page_load"))
#
# ================================================================================

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

import allure
from loguru import logger

from .config import get_config
from .exceptions import ElementNotFoundError, WaitTimeoutError


T = TypeVar("T")


@dataclass(frozen=True)
class WaitConfig:
    """
    Timeout settings for a single wait.

    Attributes:
        timeout: Total time budget in seconds
        poll_interval: Delay between predicate evaluations in seconds
    """
    timeout: float = 10.0
    poll_interval: float = 0.5

    def __post_init__(self):
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")


# Pre-configured wait strategies for common scenarios
WAIT_SCENARIOS: Dict[str, WaitConfig] = {
    "default": WaitConfig(),
    # Element presence after an interaction
    "element": WaitConfig(timeout=5.0, poll_interval=0.25),
    # Whole-page transitions (navigation, redirects)
    "page_load": WaitConfig(timeout=30.0, poll_interval=0.5),
    # Short checks that should settle almost immediately
    "fast": WaitConfig(timeout=2.0, poll_interval=0.1),
}

DEFAULT_IGNORED_EXCEPTIONS: Tuple[Type[BaseException], ...] = (ElementNotFoundError,)


def get_wait_config(scenario: str = "default") -> WaitConfig:
    """
    Get wait configuration for a specific scenario.

    Values under ``waits.<scenario>`` in the configuration file (or the
    matching environment variables) override the built-in presets.

    Args:
        scenario: Scenario name (e.g., "element", "page_load")

    Returns:
        WaitConfig for the scenario, or default if not found
    """
    base = WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])
    return WaitConfig(
        timeout=float(get_config(f"waits.{scenario}.timeout", base.timeout)),
        poll_interval=float(
            get_config(f"waits.{scenario}.poll_interval", base.poll_interval)
        ),
    )


@allure.step("Wait until: {description}")
def wait_until(
    predicate: Callable[[], T],
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    description: str = "condition",
    config: Optional[WaitConfig] = None,
    ignored_exceptions: Tuple[Type[BaseException], ...] = DEFAULT_IGNORED_EXCEPTIONS,
) -> T:
    """
    Poll ``predicate`` until it returns a truthy value or the deadline passes.

    Args:
        predicate: Zero-argument callable; a truthy return ends the wait
        timeout: Deadline in seconds (overrides config.timeout)
        poll_interval: Delay between evaluations (overrides config.poll_interval)
        description: Human-readable description for logging
        config: Optional WaitConfig providing defaults for timeout/poll_interval
        ignored_exceptions: Exceptions treated as "not yet"; anything else
            raised by the predicate propagates immediately

    Returns:
        The first truthy value returned by predicate

    Raises:
        WaitTimeoutError: If the deadline elapses first. The message and
            ``last_error`` carry the last observed failure reason.
    """
    config = config or WaitConfig()
    timeout = config.timeout if timeout is None else timeout
    poll_interval = config.poll_interval if poll_interval is None else poll_interval
    if timeout < 0 or poll_interval <= 0:
        raise ValueError(
            f"Invalid wait bounds: timeout={timeout}, poll_interval={poll_interval}"
        )

    start = time.monotonic()
    deadline = start + timeout
    attempt = 0
    last_reason: Optional[str] = None

    logger.debug(
        f"Starting wait: {description} "
        f"(timeout={timeout}s, poll_interval={poll_interval}s)"
    )

    while True:
        attempt += 1
        try:
            result = predicate()
            if result:
                logger.debug(
                    f"Wait successful after {attempt} attempts "
                    f"({time.monotonic() - start:.3f}s): {description}"
                )
                return result
            last_reason = f"condition returned {result!r}"
        except ignored_exceptions as e:
            last_reason = f"{type(e).__name__}: {e}"

        now = time.monotonic()
        if now >= deadline:
            break
        time.sleep(min(poll_interval, deadline - now))

    error_msg = (
        f"Timeout after {time.monotonic() - start:.3f}s ({attempt} attempts) "
        f"waiting for: {description}. Last failure: {last_reason}"
    )
    logger.warning(error_msg)
    raise WaitTimeoutError(error_msg, last_error=last_reason)


__all__ = [
    "WaitConfig",
    "WAIT_SCENARIOS",
    "get_wait_config",
    "wait_until",
]
