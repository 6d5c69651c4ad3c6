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

"""Discover which candidate files a build target really depends on.

This script validates hand-written build recipes experimentally. For every
target it builds the target, stamps the target and all candidate files with a
common baseline timestamp, then touches the candidates one at a time and
rebuilds. Candidates whose touch makes the target's modification time change
are reported as dependencies, in Makefile rule syntax.

Requirements:
    - Python 3.9+
    - the build tool named in --build/--clean (default: make)
    - colorama, networkx

Usage:
    scrutinize.py -t TARGET [-t TARGET ...] -d FILE [-d FILE ...]
                  [--build CMD] [--clean CMD] [--phony] [-C DIR]

Exit Codes:
    0: Success
    1: Invalid arguments, working directory or missing candidate
    2: Inference could not continue (vanished target, untouchable file)
    3: Build or clean command failed where it must succeed
    130: Interrupted
"""

import os
import sys
import signal
import logging
import argparse
from typing import Any, List, Optional

__version__ = "1.0.0"
__author__ = "Mana Battery"

from scrutineer.color_utils import Colors, print_error, print_warning, should_use_color
from scrutineer.command_templates import CommandTemplate
from scrutineer.inference import DependencyInferenceEngine, InferenceConfig, TargetAssessment, phony_targets
from scrutineer.report_utils import export_dependency_graph, format_json_output, format_phony_line, format_report_line
from scrutineer.timestamps import TimestampOracle, resolution_to_ns
from scrutineer.tool_detection import find_tool
from scrutineer.constants import (
    EXIT_SUCCESS,
    EXIT_RUNTIME_ERROR,
    EXIT_KEYBOARD_INTERRUPT,
    DEFAULT_BUILD_COMMAND,
    DEFAULT_CLEAN_COMMAND,
    DEFAULT_RESOLUTION_SECONDS,
    TARGET_PLACEHOLDER,
    SUPPORTED_GRAPH_FORMATS,
    DEFAULT_GRAPH_FORMAT,
    ArgumentError,
    ScrutineerError,
    WorkingDirectoryError,
)

# Export for tests
__all__ = ["EXIT_SUCCESS", "main", "build_parser"]

logger = logging.getLogger(__name__)


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Discover the real dependencies of build targets by touching candidate files and rebuilding.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s -t scrutineer.o -d scrutineer.c -d Makefile\n"
        f"  %(prog)s -t app -t check -d main.c -d util.h --phony\n"
        f'  %(prog)s -C build -t out.o -d ../src/a.c --build "ninja {TARGET_PLACEHOLDER}" --clean "ninja -t clean"\n',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("-t", "--target", action="append", default=[], metavar="TARGET", help="Target to assess (repeatable)")

    parser.add_argument(
        "-d", "--dependency", action="append", default=[], metavar="FILE", help="Candidate dependency to test, in trial order (repeatable)"
    )

    parser.add_argument(
        "-b",
        "--build",
        default=DEFAULT_BUILD_COMMAND,
        metavar="CMD",
        help=f"Command that builds one target; {TARGET_PLACEHOLDER} is replaced by the target anywhere it appears, else the target is appended (default: {DEFAULT_BUILD_COMMAND})",
    )

    parser.add_argument("-c", "--clean", default=DEFAULT_CLEAN_COMMAND, metavar="CMD", help=f"Command that cleans the tree (default: {DEFAULT_CLEAN_COMMAND})")

    parser.add_argument("-p", "--phony", action="store_true", help="Also print a .PHONY line listing targets that produced no file")

    parser.add_argument("-C", "--directory", metavar="DIR", help="Change to DIR before doing anything else")

    parser.add_argument(
        "--resolution",
        type=float,
        default=DEFAULT_RESOLUTION_SECONDS,
        metavar="SECONDS",
        help=f"Timestamp resolution used for touches (default: {DEFAULT_RESOLUTION_SECONDS})",
    )

    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")

    parser.add_argument(
        "--export",
        metavar="FILE",
        help=f"Export the discovered dependency graph ({', '.join(SUPPORTED_GRAPH_FORMATS)}; others get {DEFAULT_GRAPH_FORMAT} appended)",
    )

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output to stderr")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def change_directory(directory: str) -> None:
    """Enter the working directory for all build and clean invocations.

    Raises:
        WorkingDirectoryError: If the directory cannot be entered
    """
    try:
        os.chdir(directory)
    except OSError as e:
        raise WorkingDirectoryError(f"cannot change to directory {directory}: {e.strerror or e}") from e
    logger.info("Working directory: %s", os.getcwd())


def preflight_tools(config: InferenceConfig) -> None:
    """Log where the build and clean programs resolve to."""
    for program in dict.fromkeys([config.build.program, config.clean.program]):
        tool = find_tool(program)
        if not tool.is_found():
            logger.warning("%s not found in PATH", program)
        else:
            logger.info("Using %s (%s)", tool.path, tool.version or "unknown version")


def make_config(args: argparse.Namespace) -> InferenceConfig:
    """Turn parsed arguments into the engine's configuration value.

    Raises:
        ArgumentError: On missing targets/candidates or empty commands
    """
    if not args.target:
        raise ArgumentError("no targets specified")
    if not args.dependency:
        raise ArgumentError("no dependencies specified")

    return InferenceConfig(
        targets=tuple(args.target),
        dependencies=tuple(args.dependency),
        build=CommandTemplate.build(args.build),
        clean=CommandTemplate.clean(args.clean),
    )


def run(args: argparse.Namespace) -> int:
    """Run inference and render the results.

    Raises:
        ScrutineerError: On any fatal condition
    """
    if args.directory:
        change_directory(args.directory)

    try:
        resolution_ns = resolution_to_ns(args.resolution)
    except ValueError as e:
        raise ArgumentError(str(e)) from e

    config = make_config(args)
    logger.info("Build: %s", config.build)
    logger.info("Clean: %s", config.clean)
    preflight_tools(config)

    engine = DependencyInferenceEngine(config, oracle=TimestampOracle(resolution_ns))
    assessments: List[TargetAssessment] = []
    for assessment in engine.run():
        assessments.append(assessment)
        if args.format == "text" and assessment.is_real:
            print(format_report_line(assessment), flush=True)

    if args.format == "json":
        print(format_json_output(assessments, __version__))
    elif args.phony:
        phony = phony_targets(assessments)
        if phony:
            print(format_phony_line(phony))

    if args.export:
        export_dependency_graph(args.export, assessments)

    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s", stream=sys.stderr)

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    if args.verbose:
        print(f"Scrutineer v{__version__}", file=sys.stderr)

    try:
        return run(args)
    except ScrutineerError as e:
        print_error(str(e))
        return e.exit_code


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
