"""
Asana API access.

AsanaClient is the only component that talks to the network.
"""

from asana_tree.api.client import AsanaClient

__all__ = ["AsanaClient"]
