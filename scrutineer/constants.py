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
"""Shared constants for the scrutineer tools.

This module provides centralized constants used by the inference engine and
the command-line front end, plus the exception hierarchy whose exit codes the
entry point maps to process termination.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_RECIPE_FAILED = 3  # Build or clean command failed where it must not
EXIT_KEYBOARD_INTERRUPT = 130

# Reported by the process runner when the child could not be started at all
EXIT_SPAWN_FAILED = 127

# =============================================================================
# Command Template Defaults
# =============================================================================

TARGET_PLACEHOLDER = "{target}"  # Reserved slot in a build template
DEFAULT_BUILD_PROGRAM = "make"
DEFAULT_CLEAN_TARGET = "clean"
DEFAULT_BUILD_COMMAND = f"{DEFAULT_BUILD_PROGRAM} {TARGET_PLACEHOLDER}"
DEFAULT_CLEAN_COMMAND = f"{DEFAULT_BUILD_PROGRAM} {DEFAULT_CLEAN_TARGET}"

# =============================================================================
# Timestamp Constants
# =============================================================================

NS_PER_SECOND = 1_000_000_000
EPOCH = 0  # Sentinel mtime for absent or unreadable paths
DEFAULT_RESOLUTION_SECONDS = 1.0  # Coarsest common filesystem mtime granularity
POLL_INTERVAL_SECONDS = 0.0005  # Oracle spin interval (sub-millisecond)

# =============================================================================
# Output Constants
# =============================================================================

PHONY_DECLARATION = ".PHONY"
SUPPORTED_GRAPH_FORMATS = [".graphml", ".gexf", ".json"]
DEFAULT_GRAPH_FORMAT = ".graphml"

# =============================================================================
# Tool Detection Constants
# =============================================================================

VERSION_PROBE_TIMEOUT = 5  # Seconds allowed for `<tool> --version`

# =============================================================================
# Exception Classes
# =============================================================================


class ScrutineerError(Exception):
    """Base exception for all scrutineer errors.

    All scrutineer exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(ScrutineerError):
    """Raised when setup validation fails (arguments, paths, candidates)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ArgumentError(ValidationError):
    """Raised when command-line arguments are invalid."""


class WorkingDirectoryError(ValidationError):
    """Raised when the requested working directory cannot be entered."""


class MissingDependencyError(ValidationError):
    """Raised when a dependency candidate is absent after the initial clean."""


# External tool errors
class ExternalToolError(ScrutineerError):
    """Raised when the build or clean command fails."""

    def __init__(self, message: str, exit_code: int = EXIT_RECIPE_FAILED):  # pylint: disable=useless-parent-delegation
        super().__init__(message, exit_code)


class CleanFailedError(ExternalToolError):
    """Raised when the clean command exits non-zero."""


class BuildFailedError(ExternalToolError):
    """Raised when a build fails during the trial loop."""


# Inference errors (EXIT_RUNTIME_ERROR)
class InferenceError(ScrutineerError):
    """Raised when the trial state can no longer be trusted."""


class TargetVanishedError(InferenceError):
    """Raised when a real target's artifact disappears mid-trial."""


class TimestampWriteError(InferenceError):
    """Raised when a dependency's modification time cannot be set."""


# Per-target recoverable conditions
class TargetSkipped(ScrutineerError):
    """Raised inside a target's assessment to skip that target only.

    The engine catches these at its per-target loop boundary; they never
    terminate the run.
    """

    def __init__(self, target: str, message: str):
        super().__init__(message)
        self.target = target


class BrokenRecipeError(TargetSkipped):
    """Raised when the initial build of a target fails."""


class BaselineStampError(TargetSkipped):
    """Raised when a target's baseline timestamp cannot be written."""
