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
"""Dependency inference by timestamp perturbation.

For each target the engine builds it once, forces the target and every
candidate dependency to a common baseline timestamp, and then touches the
candidates one at a time, rebuilding after each touch. A candidate whose
touch is followed by a change of the target's modification time is reported
as a dependency of that target.

Per-target state machine::

    Init -> InitialBuild -> Phony
                         -> RealBaseline -> TrialLoop -> Reported
    InitialBuild failure -> skipped with a warning

Failure policy:
    - Initial clean failure, empty target or dependency lists, and candidates
      missing after the initial clean abort before any target is assessed.
    - A failing initial build, or a target whose baseline stamp cannot be
      written, skips only that target.
    - Once trials have started, a failing build, a vanished target, an
      untouchable dependency or a failing clean abort the whole run.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .color_utils import print_warning
from .command_templates import CommandTemplate
from .constants import (
    EPOCH,
    ArgumentError,
    BaselineStampError,
    BrokenRecipeError,
    BuildFailedError,
    CleanFailedError,
    MissingDependencyError,
    TargetSkipped,
    TargetVanishedError,
    TimestampWriteError,
)
from .fs_probe import FilesystemProbe
from .process_runner import ProcessRunner
from .timestamps import Timestamp, TimestampOracle

logger = logging.getLogger(__name__)


class Classification(enum.Enum):
    """Outcome of a target's initial build."""

    UNKNOWN = "unknown"
    REAL = "real"
    PHONY = "phony"


@dataclass(frozen=True)
class InferenceConfig:
    """Targets, candidates and commands for one run.

    Attributes:
        targets: Targets to assess, in order
        dependencies: Candidate dependencies, in trial order
        build: Build template with a target slot
        clean: Clean template
    """

    targets: Tuple[str, ...]
    dependencies: Tuple[str, ...]
    build: CommandTemplate
    clean: CommandTemplate


@dataclass(frozen=True)
class TargetAssessment:
    """Result of assessing one target.

    Attributes:
        target: Target name
        classification: REAL, PHONY, or UNKNOWN when the target was skipped
        dependencies: Candidates whose touch caused a rebuild, in trial order
        trial_stamps: Timestamps assigned to candidates during the trial loop
        skipped_reason: Why the target was skipped, if it was
    """

    target: str
    classification: Classification
    dependencies: Tuple[str, ...] = ()
    trial_stamps: Tuple[Timestamp, ...] = ()
    skipped_reason: Optional[str] = None

    @property
    def is_real(self) -> bool:
        return self.classification is Classification.REAL

    @property
    def is_phony(self) -> bool:
        return self.classification is Classification.PHONY


class DependencyInferenceEngine:
    """Orchestrates clean/build/touch cycles over the configured targets."""

    def __init__(
        self,
        config: InferenceConfig,
        runner: Optional[ProcessRunner] = None,
        probe: Optional[FilesystemProbe] = None,
        oracle: Optional[TimestampOracle] = None,
    ):
        self.config = config
        self.runner = runner if runner is not None else ProcessRunner()
        self.probe = probe if probe is not None else FilesystemProbe()
        self.oracle = oracle if oracle is not None else TimestampOracle()

    def run(self) -> Iterator[TargetAssessment]:
        """Prepare the tree, then assess every target in order.

        Yields one assessment per target as soon as it is complete. Skipped
        targets are reported with a warning and yielded as UNKNOWN.

        Raises:
            ScrutineerError: On any setup or mid-trial fatal condition
        """
        self.prepare()
        for index, target in enumerate(self.config.targets, 1):
            logger.info("Assessing target %d/%d: %s", index, len(self.config.targets), target)
            try:
                yield self.assess(target)
            except TargetSkipped as e:
                print_warning(str(e))
                yield TargetAssessment(target=e.target, classification=Classification.UNKNOWN, skipped_reason=str(e))

    def prepare(self) -> None:
        """Validate the configuration and run the initial clean.

        Raises:
            ArgumentError: If there are no targets or no candidates
            CleanFailedError: If the clean command fails
            MissingDependencyError: If a candidate is absent after cleaning
        """
        if not self.config.targets:
            raise ArgumentError("no targets specified")
        if not self.config.dependencies:
            raise ArgumentError("no dependencies specified")

        self._clean()
        for dependency in self.config.dependencies:
            if not self.probe.exists(dependency):
                raise MissingDependencyError(f"dependency {dependency} does not exist after clean")
        logger.info("Initial clean done; %d candidate(s) present", len(self.config.dependencies))

    def assess(self, target: str) -> TargetAssessment:
        """Run the full assessment of one target, starting from a clean tree.

        Raises:
            BrokenRecipeError: If the initial build fails (recoverable)
            BaselineStampError: If the target's baseline cannot be written (recoverable)
            ScrutineerError: On mid-trial fatal conditions
        """
        if self.runner.execute(self.config.build.render(target)) != 0:
            raise BrokenRecipeError(target, f"broken recipe for {target}")

        classification = self._classify(target)
        if classification is Classification.PHONY:
            logger.info("%s produced no file; treating it as phony", target)
            self._clean()
            return TargetAssessment(target=target, classification=classification)

        try:
            base, candidates = self._stamp_baseline(target)
        except BaselineStampError:
            # The target was built, so the tree still has to be reset
            self._clean()
            raise
        dependencies, stamps = self._trial_loop(target, base, candidates)
        self._clean()

        logger.info("%s: %d of %d candidate(s) caused a rebuild", target, len(dependencies), len(self.config.dependencies))
        return TargetAssessment(
            target=target,
            classification=classification,
            dependencies=tuple(dependencies),
            trial_stamps=tuple(stamps),
        )

    def _classify(self, target: str) -> Classification:
        if self.probe.exists(target):
            return Classification.REAL
        return Classification.PHONY

    def _stamp_baseline(self, target: str) -> Tuple[Timestamp, List[str]]:
        """Force every present candidate and the target to a common timestamp.

        Returns:
            Tuple of (baseline, candidates stamped); absent candidates sit out
            this target's trials
        """
        base = self.oracle.advance_past(EPOCH)
        candidates: List[str] = []
        for dependency in self.config.dependencies:
            if not self.probe.exists(dependency):
                print_warning(f"clean did not remove/restore {dependency} as expected")
                continue
            candidates.append(dependency)
            if not self.probe.set_mtime(dependency, base):
                raise TimestampWriteError(f"failed to set timestamp on {dependency}")

        if not self.probe.set_mtime(target, base):
            raise BaselineStampError(target, f"failed to set baseline timestamp on {target}")
        logger.debug("Baseline for %s is %d", target, base)
        return base, candidates

    def _trial_loop(self, target: str, base: Timestamp, candidates: Sequence[str]) -> Tuple[List[str], List[Timestamp]]:
        """Touch each candidate in turn and rebuild, crediting detected changes.

        The comparison baseline only moves when a change is detected, so a
        build tool that skips up-to-date work does not shift credit onto a
        later candidate.
        """
        prev = base
        dependencies: List[str] = []
        stamps: List[Timestamp] = []
        build_argv = self.config.build.render(target)

        for dependency in candidates:
            t = self.oracle.advance_past(prev)
            stamps.append(t)
            if not self.probe.set_mtime(dependency, t):
                raise TimestampWriteError(f"failed to set timestamp on {dependency}")

            if self.runner.execute(build_argv) != 0:
                raise BuildFailedError(f"failed to build {target} after touching {dependency}")
            if not self.probe.exists(target):
                raise TargetVanishedError(f"{target} disappeared after touching {dependency}")

            current = self.probe.mtime(target)
            if current != prev:
                logger.debug("%s rebuilt after touching %s", target, dependency)
                dependencies.append(dependency)
                prev = current
            else:
                logger.debug("%s unchanged after touching %s", target, dependency)

        return dependencies, stamps

    def _clean(self) -> None:
        if self.runner.execute(self.config.clean.render()) != 0:
            raise CleanFailedError("clean failed")


def phony_targets(assessments: Sequence[TargetAssessment]) -> List[str]:
    """Return the names of targets classified phony, in assessment order."""
    return [a.target for a in assessments if a.is_phony]
