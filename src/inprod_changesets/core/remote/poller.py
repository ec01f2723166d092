# src/inprod_changesets/core/remote/poller.py
"""
TaskPoller — acompanhamento de uma task remota até um estado terminal.

Máquina de estados:

    POLLING ──► SUCCESS | FAILURE | REVOKED | TIMEOUT

Algoritmo (intervalo fixo de 5 s):
    - enquanto `elapsed < timeout`: dorme um intervalo, acumula `elapsed`
      e consulta o status da task
    - falha de transporte (ou corpo ilegível) → warning e segue no loop;
      não consome um desfecho e não encurta o orçamento
    - status HTTP não-2xx → TransportError propagado (aborta a operação)
    - SUCCESS → resultado (`{}` quando ausente)
    - FAILURE → erro (`"Unknown error"` quando ausente)
    - REVOKED → cancelada
    - qualquer outro valor (PENDING, STARTED, RETRY, ...) → segue no loop
    - orçamento esgotado → TIMEOUT

Invariantes:
    - O único ponto de suspensão é o sleep antes de cada consulta
    - Nenhuma outra requisição ocorre em paralelo com um poll
    - Uma vez devolvido, o TaskOutcome é terminal

Limites explícitos:
    - Não cancela a task remota
    - Não interpreta o conteúdo de `result`
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from inprod_changesets.core.context import RunContext
from inprod_changesets.core.exceptions import ProtocolError

from .client import InProdClient


POLL_INTERVAL_SECONDS = 5


class TaskState(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    REVOKED = "REVOKED"
    TIMEOUT = "TIMEOUT"


@dataclass(frozen=True)
class TaskHandle:
    """Task remota; `label` ("Validation" / "Execution") serve só a diagnósticos."""

    task_id: str
    label: str


@dataclass(frozen=True)
class TaskOutcome:
    state: TaskState
    result: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def success(cls, result: Optional[Dict[str, Any]] = None) -> "TaskOutcome":
        return cls(state=TaskState.SUCCESS, result=dict(result or {}))

    @classmethod
    def failure(cls, error: str) -> "TaskOutcome":
        return cls(state=TaskState.FAILURE, error=error)

    @classmethod
    def revoked(cls) -> "TaskOutcome":
        return cls(state=TaskState.REVOKED)

    @classmethod
    def timeout(cls) -> "TaskOutcome":
        return cls(state=TaskState.TIMEOUT)


class TaskPoller:
    def __init__(
        self,
        client: InProdClient,
        *,
        ctx: RunContext,
        interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self._ctx = ctx
        self.interval = interval
        self._sleep = sleep

    def poll(self, handle: TaskHandle, timeout_seconds: float, *, step_id: str) -> TaskOutcome:
        """
        Consulta a task até um estado terminal ou até esgotar `timeout_seconds`.

        Raises:
            TransportError: Se o endpoint de status responder não-2xx.
        """
        ctx = self._ctx
        ctx.log(
            step_id=step_id,
            level="info",
            message=f"{handle.label} dispatched as background task (task_id: {handle.task_id})",
            task_id=handle.task_id,
        )
        ctx.log(
            step_id=step_id,
            level="info",
            message=(
                f"Polling for completion (interval: {self.interval:g}s, "
                f"timeout: {timeout_seconds:g}s)..."
            ),
        )

        elapsed = 0.0
        while elapsed < timeout_seconds:
            self._sleep(self.interval)
            elapsed += self.interval

            try:
                payload = self._client.task_status(handle.task_id)
            except (httpx.RequestError, ProtocolError) as e:
                ctx.add_warning(
                    step_id=step_id,
                    message=f"Error during polling: {e}. Retrying...",
                    task_id=handle.task_id,
                )
                continue

            ctx.log(
                step_id=step_id,
                level="debug",
                message=f"Poll response: {json.dumps(payload, default=str)}",
            )

            outcome = self._interpret(payload, handle, elapsed, step_id)
            if outcome is not None:
                return outcome

        return TaskOutcome.timeout()

    def _interpret(
        self,
        payload: Any,
        handle: TaskHandle,
        elapsed: float,
        step_id: str,
    ) -> Optional[TaskOutcome]:
        if not isinstance(payload, dict):
            payload = {}
        status = payload.get("status")

        self._ctx.log(
            step_id=step_id,
            level="info",
            message=f"  {handle.label} status: {status} ({elapsed:g}s elapsed)",
        )

        if status == TaskState.SUCCESS.value:
            self._ctx.log(step_id=step_id, level="info", message=f"{handle.label} completed successfully")
            result = payload.get("result")
            return TaskOutcome.success(result if isinstance(result, dict) else {})

        if status == TaskState.FAILURE.value:
            error = payload.get("error")
            return TaskOutcome.failure("Unknown error" if error is None else str(error))

        if status == TaskState.REVOKED.value:
            return TaskOutcome.revoked()

        return None
