"""Terminal output of snapshots."""

from asana_tree.view.renderer import Renderer, is_pseudo_section_title

__all__ = ["Renderer", "is_pseudo_section_title"]
