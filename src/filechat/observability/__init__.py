"""
FileChat Observability Module.

Provides in-process metrics collection for generation calls, errors and chat turns.
"""

from filechat.observability.metrics import MetricsStore

__all__ = ["MetricsStore"]
