#!/usr/bin/env python3
"""Tests for the exception hierarchy in scrutineer/constants.py"""

import pytest

from scrutineer.constants import (
    EXIT_INVALID_ARGS,
    EXIT_RECIPE_FAILED,
    EXIT_RUNTIME_ERROR,
    ArgumentError,
    BaselineStampError,
    BrokenRecipeError,
    BuildFailedError,
    CleanFailedError,
    ExternalToolError,
    InferenceError,
    MissingDependencyError,
    ScrutineerError,
    TargetSkipped,
    TargetVanishedError,
    TimestampWriteError,
    ValidationError,
    WorkingDirectoryError,
)


class TestExitCodes:
    """Tests mapping each error class to its exit code."""

    @pytest.mark.parametrize("error_class", [ArgumentError, WorkingDirectoryError, MissingDependencyError])
    def test_setup_errors(self, error_class: type) -> None:
        error = error_class("bad setup")
        assert isinstance(error, ValidationError)
        assert error.exit_code == EXIT_INVALID_ARGS

    @pytest.mark.parametrize("error_class", [CleanFailedError, BuildFailedError])
    def test_recipe_errors(self, error_class: type) -> None:
        error = error_class("recipe failed")
        assert isinstance(error, ExternalToolError)
        assert error.exit_code == EXIT_RECIPE_FAILED

    @pytest.mark.parametrize("error_class", [TargetVanishedError, TimestampWriteError])
    def test_inference_errors(self, error_class: type) -> None:
        error = error_class("state lost")
        assert isinstance(error, InferenceError)
        assert error.exit_code == EXIT_RUNTIME_ERROR

    def test_base_default(self) -> None:
        assert ScrutineerError("x").exit_code == EXIT_RUNTIME_ERROR
        assert str(ScrutineerError("message")) == "message"


class TestTargetSkipped:
    """Tests for recoverable per-target conditions."""

    @pytest.mark.parametrize("error_class", [BrokenRecipeError, BaselineStampError])
    def test_carries_target(self, error_class: type) -> None:
        error = error_class("out.o", "broken recipe for out.o")
        assert isinstance(error, TargetSkipped)
        assert isinstance(error, ScrutineerError)
        assert error.target == "out.o"
        assert str(error) == "broken recipe for out.o"
