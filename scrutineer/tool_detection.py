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
"""Detection of the external build and clean programs.

The build and clean commands are opaque to the inference engine; this module
only resolves their program names on PATH and records the version they
report, so a misspelled program is flagged before the first clean and
verbose runs log which tool produced the results.

Detection results are cached within the Python process session to avoid
repeated subprocess calls.
"""

import shutil
import logging
import subprocess
from typing import Optional, Dict, List
from dataclasses import dataclass

from .constants import VERSION_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

# Session-level cache for tool detection results (keyed by program name)
_tool_cache: Dict[str, "ToolInfo"] = {}


@dataclass
class ToolInfo:
    """Information about a detected external program.

    Attributes:
        command: Program name as given (e.g., "make", "ninja")
        path: Resolved executable path, or None if not on PATH
        version: First line of `<command> --version`, or None if unavailable
    """

    command: str
    path: Optional[str]
    version: Optional[str]

    def is_found(self) -> bool:
        """Check if the program was found.

        Returns:
            True if path is not None
        """
        return self.path is not None


def clear_cache() -> None:
    """Clear the tool detection cache.

    Useful for testing or when environment changes during process lifetime.
    """
    _tool_cache.clear()
    logger.debug("Tool detection cache cleared")


def _try_command(cmd_parts: List[str], timeout: int = VERSION_PROBE_TIMEOUT) -> Optional[str]:
    """Try to run a command with --version and return version output.

    Args:
        cmd_parts: Command parts (e.g., ["make"])
        timeout: Timeout in seconds for subprocess call

    Returns:
        Version output string if successful, None otherwise
    """
    try:
        result = subprocess.run(
            cmd_parts + ["--version"], capture_output=True, text=True, check=True, timeout=timeout, stdin=subprocess.DEVNULL
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired):
        return None


def _extract_version(output: str) -> str:
    """Return the first line of version output, stripped."""
    lines = output.split("\n")
    return lines[0].strip() if lines else output.strip()


def find_tool(command: str) -> ToolInfo:
    """Resolve a program on PATH and probe its version.

    Args:
        command: Program name or path (argv[0] of a command template)

    Returns:
        ToolInfo; path is None when the program cannot be resolved
    """
    if command in _tool_cache:
        return _tool_cache[command]

    path = shutil.which(command)
    if path is None:
        logger.debug("%s not found", command)
        tool_info = ToolInfo(command=command, path=None, version=None)
        _tool_cache[command] = tool_info
        return tool_info

    version_output = _try_command([path])
    version = _extract_version(version_output) if version_output else None
    logger.debug("Found %s at %s (version %s)", command, path, version or "unknown")
    tool_info = ToolInfo(command=command, path=path, version=version)
    _tool_cache[command] = tool_info
    return tool_info
