"""Core search engine: result models and the traversal pipeline."""

from .models import ContextBlock, FileResult, Line

__all__ = ["ContextBlock", "FileResult", "Line"]
