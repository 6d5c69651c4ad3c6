#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Timestamp oracle producing strictly increasing modification times.

Filesystem timestamps may be coarser than the time between two touches in a
tight loop. The oracle quantizes the wall clock to a fixed resolution and,
when asked for a stamp past some floor, spins until the quantized clock has
moved beyond it. Two successive stamps handed out this way can never be
equal, so a later mtime change is always attributable to the latest touch.

Timestamps are integer nanoseconds since the Unix epoch, matching
``os.stat().st_mtime_ns`` and ``os.utime(..., ns=...)``.
"""

import time
import logging
from typing import Callable

from .constants import NS_PER_SECOND, EPOCH, DEFAULT_RESOLUTION_SECONDS, POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

Timestamp = int


def resolution_to_ns(seconds: float) -> int:
    """Convert a resolution in seconds to whole nanoseconds.

    Raises:
        ValueError: If the resolution is not positive
    """
    resolution_ns = int(round(seconds * NS_PER_SECOND))
    if resolution_ns <= 0:
        raise ValueError(f"timestamp resolution must be positive, got {seconds}")
    return resolution_ns


class TimestampOracle:
    """Hands out distinguishable timestamps on a quantized wall clock.

    Attributes:
        resolution_ns: Clock quantum in nanoseconds
    """

    def __init__(
        self,
        resolution_ns: int = resolution_to_ns(DEFAULT_RESOLUTION_SECONDS),
        clock: Callable[[], int] = time.time_ns,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ):
        if resolution_ns <= 0:
            raise ValueError(f"timestamp resolution must be positive, got {resolution_ns}ns")
        self.resolution_ns = resolution_ns
        self._clock = clock
        self._sleep = sleep
        self._poll_interval = poll_interval

    def now(self) -> Timestamp:
        """Return the current wall clock rounded down to the resolution."""
        t = self._clock()
        return t - t % self.resolution_ns

    def advance_past(self, floor: Timestamp = EPOCH) -> Timestamp:
        """Return the first quantized clock reading strictly greater than floor.

        Blocks in a short polling loop while the clock has not yet moved past
        floor. There is no timeout; the wait is bounded by one resolution
        quantum as long as floor is not in the future.
        """
        polls = 0
        while True:
            t = self.now()
            if t > floor:
                if polls:
                    logger.debug("Clock advanced past %d after %d polls", floor, polls)
                return t
            polls += 1
            self._sleep(self._poll_interval)
