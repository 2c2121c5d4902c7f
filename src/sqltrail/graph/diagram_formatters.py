"""Diagram formatters for lineage graphs (DOT/Graphviz and Mermaid)."""

import re
from typing import List

from sqltrail.graph.models import LineageGraph, NodeType

MODEL_FILL = "#4ecdc4"

# Line break escape understood by Graphviz inside quoted labels
DOT_LINE_BREAK = "\\n"
MERMAID_LINE_BREAK = "<br/>"


def _sanitize_mermaid_id(identifier: str) -> str:
    """Sanitize an identifier for use as a Mermaid node ID.

    Replaces non-alphanumeric characters with underscores.

    Args:
        identifier: Raw node identifier

    Returns:
        Sanitized ID safe for Mermaid syntax
    """
    return re.sub(r"[^a-zA-Z0-9_]", "_", identifier)


def _escape_dot(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _quote_dot_id(identifier: str) -> str:
    """Quote an identifier for use in DOT syntax.

    Args:
        identifier: Raw node identifier

    Returns:
        Double-quoted identifier with internal quotes escaped
    """
    return f'"{_escape_dot(identifier)}"'


def _dot_label(lines: List[str]) -> str:
    """Join label lines into a quoted DOT label with Graphviz line breaks."""
    return '"' + DOT_LINE_BREAK.join(_escape_dot(line) for line in lines) + '"'


def _mermaid_label(lines: List[str]) -> str:
    escaped = [line.replace('"', "#quot;") for line in lines]
    return '"' + MERMAID_LINE_BREAK.join(escaped) + '"'


class DotFormatter:
    """Format lineage graphs as DOT (Graphviz) diagrams."""

    @staticmethod
    def format_full_graph(graph: LineageGraph) -> str:
        """Format complete lineage graph as a DOT digraph.

        Model nodes are filled; each edge carries one label line per column.

        Args:
            graph: LineageGraph with all nodes and edges

        Returns:
            DOT diagram string
        """
        lines = [
            "digraph lineage {",
            "    rankdir=LR;",
            "    node [shape=box, style=rounded];",
        ]

        if not graph.nodes and not graph.edges:
            lines.append("}")
            return "\n".join(lines)

        for node in graph.nodes:
            node_id = _quote_dot_id(node.identifier)
            if node.node_type == NodeType.MODEL:
                lines.append(
                    f'    {node_id} [style="rounded,filled", fillcolor="{MODEL_FILL}"];'
                )
            else:
                lines.append(f"    {node_id};")

        for edge in graph.edges:
            src = _quote_dot_id(edge.source_node)
            tgt = _quote_dot_id(edge.target_node)
            if edge.columns:
                lines.append(f"    {src} -> {tgt} [label={_dot_label(edge.label_lines)}];")
            else:
                lines.append(f"    {src} -> {tgt};")

        lines.append("}")
        return "\n".join(lines)


class MermaidFormatter:
    """Format lineage graphs as Mermaid diagrams."""

    @staticmethod
    def format_full_graph(graph: LineageGraph) -> str:
        """Format complete lineage graph as a Mermaid flowchart.

        Args:
            graph: LineageGraph with all nodes and edges

        Returns:
            Mermaid diagram string (flowchart LR syntax)
        """
        lines = ["flowchart LR"]

        if not graph.nodes and not graph.edges:
            return "\n".join(lines)

        for node in graph.nodes:
            node_id = _sanitize_mermaid_id(node.identifier)
            lines.append(f'    {node_id}["{node.identifier}"]')

        for edge in graph.edges:
            src = _sanitize_mermaid_id(edge.source_node)
            tgt = _sanitize_mermaid_id(edge.target_node)
            if edge.columns:
                lines.append(f"    {src} -->|{_mermaid_label(edge.label_lines)}| {tgt}")
            else:
                lines.append(f"    {src} --> {tgt}")

        model_ids = [
            _sanitize_mermaid_id(node.identifier)
            for node in graph.nodes
            if node.node_type == NodeType.MODEL
        ]
        for model_id in model_ids:
            lines.append(f"    style {model_id} fill:{MODEL_FILL}")

        return "\n".join(lines)
