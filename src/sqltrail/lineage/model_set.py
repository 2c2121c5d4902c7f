"""A collection of SQL models that reference each other."""

from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

from sqltrail.catalog import SchemaCatalog
from sqltrail.lineage.model import ResolutionIssue, SqlModel
from sqltrail.utils.file_utils import find_sql_files

if TYPE_CHECKING:
    from sqltrail.graph.models import LineageGraph


class ModelSet:
    """All models of one run together with the schema catalog."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        models: Optional[Sequence[SqlModel]] = None,
    ):
        self.catalog = catalog
        self._models: List[SqlModel] = list(models or [])
        self._issues: List[ResolutionIssue] = []

    @classmethod
    def load_from_dir(
        cls,
        dir_path: Path,
        catalog: SchemaCatalog,
        dialect: Optional[str] = None,
        recursive: bool = False,
        glob_pattern: str = "*.sql",
    ) -> "ModelSet":
        """
        Load every SQL file in a directory and assign column types.

        Args:
            dir_path: Directory holding the SQL model files
            catalog: Schema catalog used for typing
            dialect: sqlglot dialect name (None uses the generic dialect)
            recursive: Whether to search subdirectories
            glob_pattern: Glob pattern for SQL files

        Returns:
            ModelSet with typed models

        Raises:
            FileNotFoundError: If the directory or a file is missing
            ValueError: If the path is not a directory
            ParseError: If a file cannot be parsed
            TokenError: If a file cannot be tokenized
        """
        models = [
            SqlModel.from_path(path, dialect=dialect)
            for path in find_sql_files(
                dir_path, recursive=recursive, glob_pattern=glob_pattern
            )
        ]

        model_set = cls(catalog, models)
        model_set.assign_datatypes()
        return model_set

    @property
    def models(self) -> List[SqlModel]:
        """Models in load order."""
        return list(self._models)

    @property
    def issues(self) -> List[ResolutionIssue]:
        """Issues reported by the last call to assign_datatypes()."""
        return list(self._issues)

    @property
    def duplicate_names(self) -> List[str]:
        """
        Model names shared by more than one file, sorted.

        Same-stem files in different subdirectories collapse onto one graph
        node, and propagation through that name takes the first file that
        yields a type.
        """
        counts = Counter(model.name for model in self._models)
        return sorted(name for name, count in counts.items() if count > 1)

    def get_model(self, name: str) -> Optional[SqlModel]:
        """Find a model by name."""
        for model in self._models:
            if model.name == name:
                return model
        return None

    def assign_datatypes(self) -> List[ResolutionIssue]:
        """
        Assign column types across all models.

        Every model is typed against a frozen copy of all models as they were
        before this pass, so the result does not depend on load order.

        Returns:
            Issues for columns left untyped
        """
        snapshot = tuple(model.model_copy(deep=True) for model in self._models)

        issues: List[ResolutionIssue] = []
        for model in self._models:
            issues.extend(model.assign_datatypes(self.catalog, snapshot))

        self._issues = issues
        return issues

    def to_graph(
        self,
        dialect: Optional[str] = None,
        catalog_path: Optional[str] = None,
    ) -> "LineageGraph":
        """
        Build the lineage graph of all models.

        Args:
            dialect: Dialect recorded in the graph metadata
            catalog_path: Catalog location recorded in the graph metadata

        Returns:
            LineageGraph with one labeled edge per (source table, model) pair
        """
        from sqltrail.graph.builder import GraphBuilder

        builder = GraphBuilder(dialect=dialect, catalog_path=catalog_path)
        builder.add_models(self._models)
        return builder.build()
