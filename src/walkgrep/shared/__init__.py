"""Shared building blocks: error types, constants and structured logging."""
