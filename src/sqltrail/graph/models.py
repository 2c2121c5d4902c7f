"""Pydantic models for the table/model lineage graph."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from sqltrail.global_models import DataType


class NodeType(str, Enum):
    """Kind of node in the lineage graph."""

    SOURCE = "source"
    MODEL = "model"


class EdgeColumn(BaseModel):
    """A column flowing along an edge, with its coarse type."""

    name: str = Field(..., description="Display name of the column")
    data_type: DataType = Field(
        default=DataType.UNKNOWN, description="Resolved coarse type"
    )

    @property
    def display(self) -> str:
        """Label line for this column, e.g. ``user_id - String``."""
        return f"{self.name} - {self.data_type.value}"


class GraphNode(BaseModel):
    """Represents a node in the lineage graph (a table or a model)."""

    identifier: str = Field(..., description="Display name of the table or model")
    node_type: NodeType = Field(
        default=NodeType.SOURCE, description="Whether a SQL model defines this node"
    )
    file_path: Optional[str] = Field(
        None, description="SQL file defining the model, if any"
    )


class GraphEdge(BaseModel):
    """Represents a source table feeding a model."""

    source_node: str = Field(..., description="Source table display name")
    target_node: str = Field(..., description="Model name")
    columns: List[EdgeColumn] = Field(
        default_factory=list, description="Columns drawn from the source, in order"
    )
    file_path: Optional[str] = Field(
        None, description="SQL file where the relationship is defined"
    )

    @property
    def label_lines(self) -> List[str]:
        """One label line per column."""
        return [column.display for column in self.columns]


class GraphMetadata(BaseModel):
    """Metadata about the lineage graph."""

    default_dialect: Optional[str] = Field(
        default=None, description="SQL dialect used for parsing"
    )
    catalog_path: Optional[str] = Field(
        default=None, description="Schema catalog used for typing"
    )
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO 8601 timestamp of graph creation",
    )
    source_files: List[str] = Field(
        default_factory=list,
        description="List of SQL files included in the graph",
    )
    total_nodes: int = Field(
        default=0, description="Total number of nodes in the graph"
    )
    total_edges: int = Field(
        default=0, description="Total number of edges in the graph"
    )


class LineageGraph(BaseModel):
    """Serializable representation of the complete lineage graph."""

    metadata: GraphMetadata = Field(default_factory=GraphMetadata)
    nodes: List[GraphNode] = Field(
        default_factory=list, description="All nodes in the graph"
    )
    edges: List[GraphEdge] = Field(
        default_factory=list, description="All edges in the graph"
    )

    def get_node_by_identifier(self, identifier: str) -> Optional[GraphNode]:
        """
        Find a node by its identifier.

        Args:
            identifier: Node identifier to find

        Returns:
            GraphNode if found, None otherwise
        """
        for node in self.nodes:
            if node.identifier == identifier:
                return node
        return None

    def get_edge(self, source: str, target: str) -> Optional[GraphEdge]:
        """Find the edge from ``source`` to ``target``, if present."""
        for edge in self.edges:
            if edge.source_node == source and edge.target_node == target:
                return edge
        return None
