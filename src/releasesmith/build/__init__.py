"""
Platform builders.
"""

from .registry import create_builder, get_builder_class, list_platforms

__all__ = ["create_builder", "get_builder_class", "list_platforms"]
