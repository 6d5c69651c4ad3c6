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
"""Filesystem probe: existence checks and modification-time access."""

import os
import logging

from .constants import EPOCH
from .timestamps import Timestamp

logger = logging.getLogger(__name__)


class FilesystemProbe:
    """Thin wrappers around stat/utime with no retry and no caching."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def mtime(self, path: str) -> Timestamp:
        """Return the modification time of path in nanoseconds.

        Absent or unreadable paths yield EPOCH; call exists() first when
        absence matters.
        """
        try:
            return os.stat(path).st_mtime_ns
        except OSError:
            return EPOCH

    def set_mtime(self, path: str, timestamp: Timestamp) -> bool:
        """Set both access and modification time of path.

        Returns:
            True on success, False if the times could not be written
        """
        try:
            os.utime(path, ns=(timestamp, timestamp))
        except OSError as e:
            logger.debug("Cannot set mtime of %s: %s", path, e)
            return False
        return True
