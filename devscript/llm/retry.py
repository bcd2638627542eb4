# devscript/llm/retry.py
"""Retry logic for provider HTTP calls with exponential backoff."""

import logging

import httpx
from ollama import ResponseError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - httpx.HTTPStatusError with a transient status (408, 429, 5xx gateway errors)
    - ollama ResponseError with a transient status

    Connection failures are not retried: local backends report them
    immediately so the user can start the server.
    """
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUSES

    if isinstance(exception, ResponseError):
        return exception.status_code in RETRYABLE_STATUSES

    return False


# Tenacity retry decorator for provider calls
transient_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception(is_retryable),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
