"""Retry decorators using tenacity."""

from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from autoedit.utils.ffmpeg import FFmpegError


def retry_probe(max_attempts: int = 3):
    """Retry decorator for probing files that were just written.

    A freshly closed mp4 can briefly fail to parse while the filesystem
    catches up (network mounts, faststart rewrites).
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(
            (FFmpegError, ValueError, OSError)
        ),
        reraise=True,
    )
