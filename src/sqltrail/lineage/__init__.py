"""Lineage resolution: statement extraction, models and cross-model typing."""

from sqltrail.lineage.extractor import (
    AmbiguousColumnError,
    LineageError,
    OutputItem,
    SourceTable,
    extract_items_and_tables,
    parse_sql,
)
from sqltrail.lineage.model import IssueKind, ResolutionIssue, SqlModel
from sqltrail.lineage.model_set import ModelSet

__all__ = [
    "AmbiguousColumnError",
    "LineageError",
    "OutputItem",
    "SourceTable",
    "extract_items_and_tables",
    "parse_sql",
    "IssueKind",
    "ResolutionIssue",
    "SqlModel",
    "ModelSet",
]
