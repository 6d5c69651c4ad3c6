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
"""Rendering and export of dependency reports.

Text output uses Makefile rule syntax so discovered dependencies can be
compared against, or pasted into, the recipe under test. The graph export
writes the discovered target -> dependency edges with NetworkX.
"""

import os
import sys
import json
import logging
from typing import Iterable, Sequence

import networkx as nx
from networkx.readwrite import json_graph

from .color_utils import print_error, print_success
from .constants import DEFAULT_GRAPH_FORMAT, PHONY_DECLARATION, SUPPORTED_GRAPH_FORMATS
from .inference import TargetAssessment, phony_targets

logger = logging.getLogger(__name__)


def format_report_line(assessment: TargetAssessment) -> str:
    """Format one real target's report as ``target: dep1 dep2``."""
    if not assessment.dependencies:
        return f"{assessment.target}:"
    return f"{assessment.target}: {' '.join(assessment.dependencies)}"


def format_phony_line(targets: Sequence[str]) -> str:
    """Format the aggregate phony declaration, e.g. ``.PHONY: all check``."""
    return f"{PHONY_DECLARATION}: {' '.join(targets)}"


def format_json_output(assessments: Sequence[TargetAssessment], version: str) -> str:
    """Format all assessments as a JSON document.

    Args:
        assessments: Assessments in target order
        version: Tool version recorded in the document

    Returns:
        JSON formatted string
    """
    output = {
        "version": version,
        "targets": [
            {
                "target": a.target,
                "classification": a.classification.value,
                "dependencies": list(a.dependencies),
                "skipped_reason": a.skipped_reason,
            }
            for a in assessments
        ],
        "phony": phony_targets(assessments),
    }
    return json.dumps(output, indent=2)


def build_dependency_graph(assessments: Iterable[TargetAssessment]) -> "nx.DiGraph":
    """Build a directed graph with an edge from each target to each discovered dependency.

    Node attributes:
        - kind: "target" or "dependency"
        - classification: Target classification ("real", "phony", "unknown"); targets only

    Edge attributes:
        - order: Position of the dependency in the target's report
    """
    G = nx.DiGraph()
    for a in assessments:
        G.add_node(a.target, kind="target", classification=a.classification.value)
        for order, dependency in enumerate(a.dependencies):
            if not G.has_node(dependency):
                G.add_node(dependency, kind="dependency")
            G.add_edge(a.target, dependency, order=order)
    logger.info("Dependency graph built: %d nodes, %d edges", G.number_of_nodes(), G.number_of_edges())
    return G


def export_dependency_graph(filename: str, assessments: Sequence[TargetAssessment]) -> bool:
    """Export the discovered dependency graph.

    Supports: GraphML (.graphml), GEXF (.gexf), JSON node-link (.json).
    Unknown extensions fall back to GraphML with ``.graphml`` appended.

    Args:
        filename: Output filename (extension determines format)
        assessments: Assessments to export

    Returns:
        True if the file was written
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_GRAPH_FORMATS:
        logger.warning("Unsupported graph format: %s. Defaulting to %s.", ext, DEFAULT_GRAPH_FORMAT)
        filename = filename + DEFAULT_GRAPH_FORMAT
        ext = DEFAULT_GRAPH_FORMAT
    G = build_dependency_graph(assessments)

    try:
        if ext == ".gexf":
            nx.write_gexf(G, filename)
        elif ext == ".json":
            data = json_graph.node_link_data(G)
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        else:
            nx.write_graphml(G, filename)
    except (OSError, nx.NetworkXError) as e:
        logger.error("Failed to export graph: %s", e)
        print_error(f"Failed to export graph: {e}")
        return False

    logger.info("Exported dependency graph to %s", filename)
    # stdout carries only the reports
    print_success(f"Exported dependency graph to {filename}", file=sys.stderr)
    return True
