#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Pytest configuration and shared fixtures for scrutineer tests.

Integration fixtures build a small project in a temporary directory driven by
``fakemake.py``, a make-like build script run with the current interpreter:

- ``make`` rules rebuild when the target is missing or a listed input is newer
- ``always`` rules rewrite the target on every invocation
- ``phony`` rules succeed without producing a file
- ``fail`` rules exit non-zero

``fakemake.py clean`` removes every non-phony target, or fails when the rules
file sets ``clean_fails``.
"""

import os
import sys
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Fine enough to keep the integration tests fast, coarse enough to be real quantization
TEST_RESOLUTION_SECONDS = 0.01

FAKEMAKE_SOURCE = '''
import json
import os
import sys


def main(argv):
    with open("rules.json") as f:
        config = json.load(f)
    rules = config["rules"]
    goal = argv[1]

    if goal == "clean":
        if config.get("clean_fails"):
            return 1
        for name, rule in rules.items():
            if rule.get("mode", "make") != "phony" and os.path.exists(name):
                os.remove(name)
        return 0

    rule = rules.get(goal)
    if rule is None:
        return 2
    mode = rule.get("mode", "make")
    if mode == "phony":
        return 0
    if mode == "fail":
        return 1

    inputs = rule.get("inputs", [])
    if mode == "make" and os.path.exists(goal):
        built = os.stat(goal).st_mtime_ns
        if all(os.stat(i).st_mtime_ns <= built for i in inputs):
            return 0

    with open(goal, "w") as out:
        out.write(goal + "\\n")
        for i in inputs:
            with open(i) as src:
                out.write(src.read())
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
'''


class FakeProject:
    """A temporary source tree built by fakemake.py.

    Attributes:
        root: Project directory
    """

    def __init__(self, root: Path):
        self.root = root
        (root / "fakemake.py").write_text(FAKEMAKE_SOURCE)

    def add_sources(self, *names: str) -> None:
        for name in names:
            (self.root / name).write_text(f"// {name}\n")

    def write_rules(self, rules: Dict[str, Dict[str, Any]], clean_fails: bool = False) -> None:
        config = {"rules": rules, "clean_fails": clean_fails}
        (self.root / "rules.json").write_text(json.dumps(config, indent=2))

    @property
    def build_command(self) -> str:
        return f'"{sys.executable}" fakemake.py {{target}}'

    @property
    def clean_command(self) -> str:
        return f'"{sys.executable}" fakemake.py clean'

    def cli_args(self, targets: List[str], dependencies: List[str], extra: Optional[List[str]] = None) -> List[str]:
        """Command-line arguments for scrutinize.main() run against this project."""
        args = ["-C", str(self.root), "--build", self.build_command, "--clean", self.clean_command]
        args += ["--resolution", str(TEST_RESOLUTION_SECONDS)]
        for target in targets:
            args += ["-t", target]
        for dependency in dependencies:
            args += ["-d", dependency]
        return args + (extra or [])


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="scrutineer_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def fake_project(temp_dir: str, monkeypatch: Any) -> FakeProject:
    """Create a fakemake project and make it the working directory.

    Scope: function
    Dependencies: temp_dir
    Use for: End-to-end inference runs with real processes and files.
    The working directory is restored after the test even if the code under
    test changes it.
    """
    monkeypatch.chdir(temp_dir)
    return FakeProject(Path(temp_dir))
