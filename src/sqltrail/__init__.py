"""SQL Trail - column lineage across SQL models and a declared schema catalog."""

__version__ = "0.1.0"
