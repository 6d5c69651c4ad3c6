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
"""Synchronous execution of build and clean commands.

The child's standard input, output and error are attached to the null device,
so nothing the build tool prints can interleave with the dependency reports.
"""

import sys
import logging
import subprocess
from typing import Sequence

from .constants import EXIT_SPAWN_FAILED

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs one command at a time to completion and reports its exit status."""

    def __init__(self) -> None:
        self.invocations = 0

    def execute(self, argv: Sequence[str]) -> int:
        """Run argv, wait for it to finish and return its exit status.

        Args:
            argv: Non-empty argument vector; argv[0] is looked up on PATH

        Returns:
            The child's exit status. A child that could not be started is
            reported as EXIT_SPAWN_FAILED; a child killed by a signal as the
            negated signal number (both non-zero).
        """
        if not argv:
            raise ValueError("argv must not be empty")

        # Buffered parent output must reach its destination before the child
        # inherits the process state.
        sys.stdout.flush()
        sys.stderr.flush()

        self.invocations += 1
        logger.debug("Running: %s", " ".join(argv))
        try:
            result = subprocess.run(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except (OSError, ValueError) as e:
            logger.debug("Failed to start %s: %s", argv[0], e)
            return EXIT_SPAWN_FAILED

        if result.returncode != 0:
            logger.debug("%s exited with status %d", argv[0], result.returncode)
        return result.returncode
