#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Cancellation token for cooperative run termination.

The execution engine checks the token before each (node, symbol) step, so
a cancelled run stops between steps and keeps every result recorded so far.
"""

import threading
from datetime import datetime
from typing import Optional


class CancellationToken:
    """
    Thread-safe cancellation flag for a single run.

    Usage:
        token = CancellationToken()

        # From a UI thread:
        token.cancel()

        # The engine, before every step:
        if token.is_cancelled():
            ...stop...
    """

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id
        self._cancelled = threading.Event()
        self.created_at = datetime.now()

    def cancel(self):
        """Signal cancellation. Thread-safe."""
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        """Check if cancellation was requested. Thread-safe."""
        return self._cancelled.is_set()

