"""Shared CLI building blocks: context, options, models and error handling."""
