#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Cooperative cancellation and progress reporting for long-running operations.

Overlap detection and read-to-reference alignment are quadratic in the input
size. Both accept a CancellationToken that is polled every few units of work
and an optional progress callback receiving a fraction in [0.0, 1.0].

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import logging
import threading
from typing import Callable, Optional

from ..errors import ContigWeaverError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

# Units of work between two cancellation/progress checks
DEFAULT_CHECK_INTERVAL = 100


class AssemblyCancelledError(ContigWeaverError):
    """
    Raised when the caller requested early termination.
    
    This is an abort outcome, not an input error: no partial result is
    returned alongside it.
    """
    pass


class CancellationToken:
    """
    Thread-safe cancellation flag shared between a caller and its workers.
    
    Example:
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token.is_cancelled
        True
    """
    
    def __init__(self):
        self._event = threading.Event()
    
    def cancel(self):
        """Request cancellation. Idempotent."""
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()
    
    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
    
    def raise_if_cancelled(self):
        """Raise AssemblyCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise AssemblyCancelledError("Operation cancelled by caller")
    
    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"


def check_cancelled(token: Optional[CancellationToken]):
    """Raise if *token* is set; a missing token never cancels."""
    if token is not None:
        token.raise_if_cancelled()


class ProgressReporter:
    """
    Wraps an optional progress callback.
    
    Reported values are clamped to [0.0, 1.0] and never decrease, so callers
    see a monotone sequence. ``finish()`` reports 1.0 exactly once. The
    reporter is safe to share between worker threads.
    """
    
    def __init__(self, callback: Optional[ProgressCallback] = None, total: int = 1):
        """
        Args:
            callback: Function receiving the completed fraction
            total: Number of work units that make up 100%
        """
        self.callback = callback
        self.total = max(1, total)
        self._done = 0
        self._last = 0.0
        self._finished = False
        self._lock = threading.Lock()
    
    def advance(self, units: int = 1):
        """Record *units* of completed work and report the new fraction."""
        with self._lock:
            self._done += units
            self._emit(self._done / self.total)
    
    def report(self, fraction: float):
        """Report an absolute fraction (ignored if it would go backwards)."""
        with self._lock:
            self._emit(fraction)
    
    def finish(self):
        """Report completion (1.0)."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            self._last = 1.0
            if self.callback is not None:
                self.callback(1.0)
    
    def _emit(self, fraction: float):
        # Values at 1.0 are reserved for finish()
        fraction = min(max(fraction, 0.0), 1.0)
        if self._finished or fraction <= self._last or fraction >= 1.0:
            return
        self._last = fraction
        if self.callback is not None:
            self.callback(fraction)

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
