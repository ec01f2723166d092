"""
Fronteira remota: cliente HTTP da API InProd e TaskPoller.

Componentes:
    - client → InProdClient, endpoints, build_url
    - poller → TaskPoller, TaskHandle, TaskOutcome, TaskState
"""

from .client import InProdClient, OperationKind, build_url, endpoint_for
from .poller import POLL_INTERVAL_SECONDS, TaskHandle, TaskOutcome, TaskPoller, TaskState

__all__ = [
    "InProdClient",
    "OperationKind",
    "build_url",
    "endpoint_for",
    "POLL_INTERVAL_SECONDS",
    "TaskHandle",
    "TaskOutcome",
    "TaskPoller",
    "TaskState",
]
