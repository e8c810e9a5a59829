"""Bazel build graph adapters."""

from .query import KEEP_GOING, NO_TOOL_DEPS, BazelQuery

__all__ = ["BazelQuery", "KEEP_GOING", "NO_TOOL_DEPS"]
