"""
Engine do InProd Changesets: Orchestrator e agregação de resultados.
"""

from .aggregate import FAILING_STATUSES, accumulate, failed_results, failure_message, worst_status
from .orchestrator import Orchestrator, RunResult

__all__ = [
    "FAILING_STATUSES",
    "accumulate",
    "failed_results",
    "failure_message",
    "worst_status",
    "Orchestrator",
    "RunResult",
]
