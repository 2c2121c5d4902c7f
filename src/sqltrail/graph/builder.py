"""Graph builder for constructing lineage graphs from typed SQL models."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Set

import rustworkx as rx

from sqltrail.global_models import DataType
from sqltrail.graph.models import (
    EdgeColumn,
    GraphEdge,
    GraphMetadata,
    GraphNode,
    LineageGraph,
    NodeType,
)
from sqltrail.lineage.extractor import OutputItem
from sqltrail.lineage.model import SqlModel


class GraphBuilder:
    """Build table/model lineage graphs using rustworkx."""

    def __init__(
        self,
        dialect: Optional[str] = None,
        catalog_path: Optional[str] = None,
    ):
        """
        Initialize the graph builder.

        Args:
            dialect: SQL dialect recorded in the metadata
            catalog_path: Catalog location recorded in the metadata
        """
        self.dialect = dialect
        self.catalog_path = catalog_path
        self.graph: rx.PyDiGraph = rx.PyDiGraph()
        self._node_index_map: Dict[str, int] = {}  # identifier -> rustworkx node index
        self._edge_index_map: Dict[tuple, int] = {}  # (source, target) -> edge index
        self._model_files: Dict[str, Optional[str]] = {}
        self._source_files: Set[str] = set()

    def add_model(self, model: SqlModel) -> "GraphBuilder":
        """
        Add one edge per source table of a model.

        Each edge runs from the table's display name to the model name and is
        labeled with the model's columns drawn from that table. A repeated
        (source, model) pair replaces the earlier label.

        Args:
            model: A typed SQL model

        Returns:
            self for method chaining
        """
        self._model_files[model.name] = model.file_path
        if model.file_path:
            self._source_files.add(model.file_path)

        for source in model.tables:
            items = OutputItem.filter_by_source(model.items, source, model.tables)
            edge = GraphEdge(
                source_node=source.name,
                target_node=model.name,
                columns=[
                    EdgeColumn(
                        name=item.display_name,
                        data_type=item.data_type or DataType.UNKNOWN,
                    )
                    for item in items
                ],
                file_path=model.file_path,
            )

            source_idx = self._ensure_node(edge.source_node)
            target_idx = self._ensure_node(edge.target_node)

            edge_key = (edge.source_node, edge.target_node)
            if edge_key in self._edge_index_map:
                self.graph.update_edge_by_index(
                    self._edge_index_map[edge_key], edge.model_dump()
                )
            else:
                self._edge_index_map[edge_key] = self.graph.add_edge(
                    source_idx, target_idx, edge.model_dump()
                )

        return self

    def add_models(self, models: Sequence[SqlModel]) -> "GraphBuilder":
        """
        Add several models in order.

        Returns:
            self for method chaining
        """
        for model in models:
            self.add_model(model)
        return self

    def _ensure_node(self, identifier: str) -> int:
        """
        Ensure a node exists in the graph, creating it if necessary.

        Args:
            identifier: Table or model display name

        Returns:
            rustworkx node index
        """
        if identifier in self._node_index_map:
            return self._node_index_map[identifier]

        node = GraphNode(identifier=identifier)
        node_idx = self.graph.add_node(node.model_dump())
        self._node_index_map[identifier] = node_idx
        return node_idx

    def build(self) -> LineageGraph:
        """
        Build and return the final LineageGraph.

        Returns:
            LineageGraph with metadata, nodes, and edges
        """
        nodes: List[GraphNode] = []
        for idx in self.graph.node_indices():
            node = GraphNode(**self.graph[idx])
            if node.identifier in self._model_files:
                node.node_type = NodeType.MODEL
                node.file_path = self._model_files[node.identifier]
            nodes.append(node)

        edges = []
        for edge_idx in self.graph.edge_indices():
            edge_data = self.graph.get_edge_data_by_index(edge_idx)
            edges.append(GraphEdge(**edge_data))

        metadata = GraphMetadata(
            default_dialect=self.dialect,
            catalog_path=self.catalog_path,
            created_at=datetime.now(timezone.utc).isoformat(),
            source_files=sorted(self._source_files),
            total_nodes=len(nodes),
            total_edges=len(edges),
        )

        return LineageGraph(
            metadata=metadata,
            nodes=nodes,
            edges=edges,
        )

    @property
    def rustworkx_graph(self) -> rx.PyDiGraph:
        """Get the underlying rustworkx graph for direct operations."""
        return self.graph

    @property
    def node_index_map(self) -> Dict[str, int]:
        """Get mapping from node identifiers to rustworkx indices."""
        return self._node_index_map.copy()
