"""Graph construction and rendering for SQL Trail."""

from sqltrail.graph.builder import GraphBuilder
from sqltrail.graph.diagram_formatters import DotFormatter, MermaidFormatter
from sqltrail.graph.models import (
    EdgeColumn,
    GraphEdge,
    GraphMetadata,
    GraphNode,
    LineageGraph,
    NodeType,
)
from sqltrail.graph.serialization import (
    load_graph,
    render_graph,
    save_graph,
    to_rustworkx,
    write_graph,
)

__all__ = [
    # Models
    "EdgeColumn",
    "GraphNode",
    "GraphEdge",
    "GraphMetadata",
    "LineageGraph",
    "NodeType",
    # Builder
    "GraphBuilder",
    # Formatters
    "DotFormatter",
    "MermaidFormatter",
    # Serialization
    "load_graph",
    "render_graph",
    "save_graph",
    "to_rustworkx",
    "write_graph",
]
