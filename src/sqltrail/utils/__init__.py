"""Utility modules for SQL Trail."""
