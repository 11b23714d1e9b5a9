"""Pitch Panda startup analysis package."""

from .runner import analyze_batch, analyze_startup, main, stream_analysis

__all__ = ["analyze_startup", "stream_analysis", "analyze_batch", "main"]
