"""
FileChat Metrics Endpoint.

Exposes observability metrics for monitoring and debugging.
"""

from fastapi import APIRouter, Depends

from filechat.deps import get_metrics
from filechat.observability.metrics import MetricsStore

router = APIRouter(prefix="/api", tags=["metrics"])


@router.get("/metrics")
def get_metrics_summary(metrics: MetricsStore = Depends(get_metrics)) -> dict:
    """
    Get current metrics summary.

    Example response:
    ```json
    {
      "uptime_seconds": 3600.5,
      "collected_at": "2025-12-25T19:00:00Z",
      "operations": {
        "generation": {"call_count": 42, "p50_ms": 820.1, "errors": {"GENERATION_FAILED": 1}}
      },
      "global_errors": {"UNSUPPORTED_FILE_TYPE": 2},
      "counters": {"chat_turns": 42, "fallback_responses": 1}
    }
    ```
    """
    return metrics.get_summary()
