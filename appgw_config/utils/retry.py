"""
Exponential backoff for transient policy store failures.
"""

import time
import random
import logging
from typing import Callable, TypeVar

from ..data_access.exceptions import RetryableError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    jitter: bool = True
) -> float:
    """
    Compute the delay before the next attempt.

    Args:
        attempt: Zero-based number of the attempt that just failed
        base_delay: Initial delay in seconds
        max_delay: Upper bound before jitter, in seconds
        jitter: Whether to add up to 10% random jitter

    Returns:
        Delay in seconds
    """
    delay = min(base_delay * (2 ** attempt), max_delay)
    if jitter:
        delay += random.uniform(0, 0.1 * delay)
    return delay


def retry_operation(
    operation: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    jitter: bool = True
) -> T:
    """
    Retry an operation with exponential backoff.

    Only RetryableError is retried; any other exception propagates from the
    first attempt.

    Args:
        operation: Callable to retry
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        jitter: Whether to add random jitter to delay

    Returns:
        Result of the operation

    Raises:
        RetryableError: If the last attempt still fails

    Example:
        policy = retry_operation(
            lambda: client.get_namespaced_custom_object(...),
            max_retries=3
        )
    """
    for attempt in range(max_retries + 1):
        try:
            result = operation()
        except RetryableError as e:
            if attempt == max_retries:
                logger.error(
                    f"Operation failed after {max_retries} retries",
                    extra={'max_retries': max_retries, 'error': str(e)}
                )
                raise

            delay = backoff_delay(attempt, base_delay, max_delay, jitter)
            logger.warning(
                f"Retry attempt {attempt + 1}/{max_retries} after {delay:.2f}s",
                extra={
                    'attempt': attempt + 1,
                    'max_retries': max_retries,
                    'delay_seconds': delay,
                    'error': str(e)
                }
            )
            time.sleep(delay)
            continue

        if attempt > 0:
            logger.info(
                f"Operation succeeded after {attempt} retries",
                extra={'attempt': attempt, 'max_retries': max_retries}
            )
        return result
