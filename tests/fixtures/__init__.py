"""
Test fixtures for deterministic testing.

This module provides:
- InMemoryStore: BlockStore double backed by plain dicts
"""

from .memory_store import InMemoryStore

__all__ = ["InMemoryStore"]
