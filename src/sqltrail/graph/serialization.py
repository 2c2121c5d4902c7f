"""Serialization and rendering of lineage graphs."""

from pathlib import Path
from typing import Dict, Tuple

import rustworkx as rx

from sqltrail.global_models import OutputFormat
from sqltrail.graph.diagram_formatters import DotFormatter, MermaidFormatter
from sqltrail.graph.models import LineageGraph


def save_graph(graph: LineageGraph, output_path: Path) -> None:
    """
    Save a LineageGraph to a JSON file.

    Args:
        graph: LineageGraph to save
        output_path: Output file path
    """
    output_path.write_text(
        graph.model_dump_json(indent=2),
        encoding="utf-8",
    )


def load_graph(input_path: Path) -> LineageGraph:
    """
    Load a LineageGraph from a JSON file.

    Args:
        input_path: Input file path

    Returns:
        Loaded LineageGraph

    Raises:
        FileNotFoundError: If input file doesn't exist
        ValueError: If file content is invalid JSON or doesn't match schema
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Graph file not found: {input_path}")

    content = input_path.read_text(encoding="utf-8")
    return LineageGraph.model_validate_json(content)


def to_rustworkx(graph: LineageGraph) -> Tuple[rx.PyDiGraph, Dict[str, int]]:
    """
    Convert a LineageGraph to a rustworkx PyDiGraph.

    Args:
        graph: LineageGraph to convert

    Returns:
        Tuple of (PyDiGraph, node_identifier_to_index_map)
    """
    rx_graph: rx.PyDiGraph = rx.PyDiGraph()
    node_map: Dict[str, int] = {}

    for node in graph.nodes:
        node_map[node.identifier] = rx_graph.add_node(node.model_dump())

    # Edges whose endpoints are not declared as nodes are dropped
    for edge in graph.edges:
        source_idx = node_map.get(edge.source_node)
        target_idx = node_map.get(edge.target_node)
        if source_idx is not None and target_idx is not None:
            rx_graph.add_edge(source_idx, target_idx, edge.model_dump())

    return rx_graph, node_map


def render_graph(graph: LineageGraph, output_format: OutputFormat) -> str:
    """
    Render a LineageGraph as text in the requested format.

    Args:
        graph: LineageGraph to render
        output_format: dot, mermaid or json

    Returns:
        Rendered graph text
    """
    output_format = OutputFormat(output_format)
    if output_format == OutputFormat.DOT:
        return DotFormatter.format_full_graph(graph)
    if output_format == OutputFormat.MERMAID:
        return MermaidFormatter.format_full_graph(graph)
    return graph.model_dump_json(indent=2)


def write_graph(
    graph: LineageGraph,
    output_path: Path,
    output_format: OutputFormat = OutputFormat.DOT,
) -> None:
    """
    Render a LineageGraph and write it to a file.

    Args:
        graph: LineageGraph to write
        output_path: Output file path
        output_format: dot (default), mermaid or json
    """
    output_path.write_text(
        render_graph(graph, output_format) + "\n",
        encoding="utf-8",
    )
