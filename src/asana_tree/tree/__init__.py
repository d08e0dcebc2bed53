"""Snapshot assembly from Asana query results."""

from asana_tree.tree.builder import Fetcher, TreeBuilder

__all__ = ["Fetcher", "TreeBuilder"]
