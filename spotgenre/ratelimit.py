"""
Rate limiting utilities for Spotify API calls.

Provides exponential backoff and retry logic to handle 429 rate limit errors
and transient network failures.
"""

from __future__ import annotations

import os
import random
import time
from typing import Callable, Iterator, Optional, Sequence, TypeVar

import requests

from .errors import RateLimitError
from .logging_utils import get_logger

DEFAULT_REQUEST_DELAY = 0.15  # Base delay after each successful call (seconds)
MAX_RETRIES = 6  # Maximum retry attempts
MAX_WAIT_TIME = 300  # Cap wait time at 5 minutes

T = TypeVar("T")

# Global adaptive backoff multiplier
_RATE_BACKOFF_MULTIPLIER = 1.0
_RATE_BACKOFF_MAX = 16.0

# Set from Settings.api_delay; None falls back to SPOTIFY_API_DELAY
_REQUEST_DELAY: Optional[float] = None


def reset_rate_backoff() -> None:
    """Reset the adaptive backoff multiplier to its default."""
    global _RATE_BACKOFF_MULTIPLIER
    _RATE_BACKOFF_MULTIPLIER = 1.0


def get_rate_backoff_multiplier() -> float:
    return _RATE_BACKOFF_MULTIPLIER


def set_request_delay(delay: Optional[float]) -> None:
    """Override the post-call delay for this process. Pass None to use the environment."""
    global _REQUEST_DELAY
    _REQUEST_DELAY = delay


def _request_delay() -> float:
    if _REQUEST_DELAY is not None:
        return _REQUEST_DELAY
    try:
        return float(os.environ.get("SPOTIFY_API_DELAY", DEFAULT_REQUEST_DELAY))
    except ValueError:
        return DEFAULT_REQUEST_DELAY


def _retry_after(error: Exception):
    """Pull a Retry-After value from a spotipy/requests error, if any."""
    headers = getattr(error, "headers", None)
    if headers and hasattr(headers, "get"):
        value = headers.get("Retry-After") or headers.get("retry-after")
        if value is not None:
            return value
    response = getattr(error, "response", None)
    if response is not None and getattr(response, "headers", None):
        return response.headers.get("Retry-After")
    return None


def _is_rate_limited(error: Exception, retry_after) -> bool:
    status = getattr(error, "http_status", None) or getattr(error, "status", None)
    return status == 429 or retry_after is not None or "rate limit" in str(error).lower()


def api_call(
    fn: Callable[..., T],
    *args,
    max_retries: int = MAX_RETRIES,
    backoff_factor: float = 1.0,
    **kwargs,
) -> T:
    """
    Call Spotify API method with retries and exponential backoff on rate limits.

    Args:
        fn: Callable (typically a bound method on a spotipy.Spotify client)
        *args: Positional arguments for fn
        max_retries: Maximum number of retry attempts
        backoff_factor: Base backoff multiplier
        **kwargs: Keyword arguments for fn

    Returns:
        Result from fn

    Raises:
        RateLimitError: If max retries exceeded
        SpotifyException: If a non-retryable Spotify error occurs
    """
    global _RATE_BACKOFF_MULTIPLIER

    logger = get_logger()
    fn_name = getattr(fn, "__name__", str(fn))
    logger.debug(f"API call: {fn_name}()")

    for attempt in range(max_retries):
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            retry_after = _retry_after(e)
            is_rate = _is_rate_limited(e, retry_after)
            is_transient = isinstance(
                e, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
            )
            if not (is_rate or is_transient):
                raise

            wait = backoff_factor * (2 ** attempt) + random.uniform(0, 1)
            if retry_after:
                try:
                    wait = max(wait, int(retry_after))
                except (TypeError, ValueError):
                    pass
            wait = min(wait, MAX_WAIT_TIME)

            logger.warning(
                f"Transient/rate error in {fn_name}: {e}. "
                f"Retrying in {wait:.1f}s (attempt {attempt + 1}/{max_retries})"
            )
            time.sleep(wait)
            _RATE_BACKOFF_MULTIPLIER = min(_RATE_BACKOFF_MAX, _RATE_BACKOFF_MULTIPLIER * 2.0)
            continue

        delay = _request_delay() * _RATE_BACKOFF_MULTIPLIER
        if delay > 0:
            time.sleep(delay)
        # Decay multiplier on success
        _RATE_BACKOFF_MULTIPLIER = max(1.0, _RATE_BACKOFF_MULTIPLIER * 0.90)
        return result

    raise RateLimitError(f"Max retries ({max_retries}) exceeded for {fn_name}")


def chunked(seq: Sequence[T], n: int = 100) -> Iterator[Sequence[T]]:
    """
    Yield chunks of sequence.

    Args:
        seq: Sequence to chunk
        n: Chunk size

    Yields:
        Slices of at most n items
    """
    if n <= 0:
        raise ValueError("chunk size must be positive")
    for i in range(0, len(seq), n):
        yield seq[i:i + n]
