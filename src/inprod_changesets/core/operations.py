# src/inprod_changesets/core/operations.py
"""
ChangesetOperation — protocolo validate/execute para um único arquivo.

As duas operações compartilham o mesmo formato:

    1. ler o arquivo e montar o corpo no dialeto do arquivo
    2. POST no endpoint (operação × dialeto), com `?environment=` opcional
    3. extrair `data.attributes.task_id` do envelope
    4. acompanhar a task via TaskPoller
    5. mapear o desfecho terminal em OperationResult

Diferenças:
    - ValidateOperation: SUCCESS só é sucesso se `result.is_valid` for
      verdadeiro; os erros detalhados (`validation_results`) saem apenas
      como evento de log, nunca na mensagem de erro
    - ExecuteOperation: SUCCESS é sempre sucesso

Propagação:
    - TransportError / ProtocolError / ChangesetParseError / OSError são
      levantados e convertidos em FileResult pelo Orchestrator
    - desfechos remotos (FAILURE, REVOKED, TIMEOUT) voltam como valores
"""

from __future__ import annotations

import json
from typing import Any, Dict

from inprod_changesets.core.config.options import ExecutionOptions
from inprod_changesets.core.context import RunContext
from inprod_changesets.core.exceptions import ProtocolError
from inprod_changesets.core.payload.request import build_submission
from inprod_changesets.core.remote.client import InProdClient, OperationKind, endpoint_for
from inprod_changesets.core.remote.poller import TaskHandle, TaskOutcome, TaskPoller, TaskState
from inprod_changesets.core.types import ChangesetFile, FileStatus, OperationResult


def extract_task_id(envelope: Any, *, subject: str) -> str:
    """
    Extrai `data.attributes.task_id` do envelope de submissão.

    Raises:
        ProtocolError: Envelope fora do formato esperado ou task_id vazio.
    """
    data = envelope.get("data") if isinstance(envelope, dict) else None
    attributes = data.get("attributes") if isinstance(data, dict) else None
    if not isinstance(attributes, dict):
        raise ProtocolError(
            message=(
                f"Failed to extract task_id from {subject} response. "
                f"Response: {json.dumps(envelope, default=str)}"
            ),
            details={"expected_path": "data.attributes.task_id"},
        )

    task_id = attributes.get("task_id")
    if task_id is None or not str(task_id).strip():
        prefix = "Validation API" if subject == "validation" else "API"
        raise ProtocolError(
            message=f"{prefix} returned an empty task_id",
            details={"expected_path": "data.attributes.task_id"},
        )
    return str(task_id).strip()


class ChangesetOperation:
    """Forma comum de Validate e Execute; subclasses definem rótulos e sucesso."""

    kind: OperationKind
    label: str
    request_label: str
    subject: str

    def __init__(self, client: InProdClient, poller: TaskPoller, ctx: RunContext):
        self._client = client
        self._poller = poller
        self._ctx = ctx

    def submit(self, changeset: ChangesetFile, options: ExecutionOptions) -> OperationResult:
        step_id = changeset.name
        content = changeset.read_text()
        body = build_submission(changeset, content, options.variables)
        endpoint = endpoint_for(self.kind, changeset.format)

        self._ctx.log(
            step_id=step_id,
            level="debug",
            message=f"{self.label} endpoint: {endpoint} (format: {changeset.format.value})",
        )

        envelope = self._client.submit(
            endpoint,
            body=body.content,
            content_type=body.content_type,
            environment=options.environment,
            label=self.request_label,
        )
        self._ctx.log(
            step_id=step_id,
            level="debug",
            message=f"{self.label} response: {json.dumps(envelope, default=str)}",
        )

        task_id = extract_task_id(envelope, subject=self.subject)
        self._on_submitted(step_id)

        outcome = self._poller.poll(
            TaskHandle(task_id=task_id, label=self.label),
            options.poll_timeout_seconds,
            step_id=step_id,
        )
        return self._to_result(outcome, options, step_id)

    def _on_submitted(self, step_id: str) -> None:
        pass

    def _to_result(self, outcome: TaskOutcome, options: ExecutionOptions, step_id: str) -> OperationResult:
        if outcome.state is TaskState.TIMEOUT:
            return OperationResult(
                status=FileStatus.TIMEOUT,
                error=self.timeout_message(options.poll_timeout_seconds),
            )
        if outcome.state is TaskState.FAILURE:
            self._ctx.log(step_id=step_id, level="error", message=f"✗ Task failed: {outcome.error}")
            return OperationResult(status=FileStatus.FAILURE, error=self.failure_message(outcome.error))
        if outcome.state is TaskState.REVOKED:
            self._ctx.add_warning(step_id=step_id, message="⚠ Task was cancelled/revoked")
            return OperationResult(status=FileStatus.REVOKED, error=self.revoked_message())
        return self._on_success(outcome.result, step_id)

    def timeout_message(self, timeout_seconds: int) -> str:
        raise NotImplementedError

    def failure_message(self, error: Any) -> str:
        raise NotImplementedError

    def revoked_message(self) -> str:
        raise NotImplementedError

    def _on_success(self, result: Dict[str, Any], step_id: str) -> OperationResult:
        raise NotImplementedError

    def _log_result_summary(self, result: Dict[str, Any], step_id: str, indent: str = "") -> None:
        if result.get("changeset_name"):
            self._ctx.log(step_id=step_id, level="info", message=f"{indent}Changeset: {result['changeset_name']}")
        if result.get("environment"):
            self._ctx.log(
                step_id=step_id,
                level="info",
                message=f"{indent}Environment: {json.dumps(result['environment'], default=str)}",
            )


class ValidateOperation(ChangesetOperation):
    kind = OperationKind.VALIDATE
    label = "Validation"
    request_label = "Validation"
    subject = "validation"

    def timeout_message(self, timeout_seconds: int) -> str:
        return f"Validation did not complete within {timeout_seconds} seconds"

    def failure_message(self, error: Any) -> str:
        return f"Validation failed: {error}"

    def revoked_message(self) -> str:
        return "Validation task was cancelled"

    def _on_success(self, result: Dict[str, Any], step_id: str) -> OperationResult:
        if not result.get("is_valid"):
            details = json.dumps(result.get("validation_results") or [], indent=2, default=str)
            self._ctx.log(
                step_id=step_id,
                level="error",
                message=f"Validation errors:\n{details}",
                validation_results=result.get("validation_results") or [],
            )
            return OperationResult(
                status=FileStatus.FAILURE,
                result=result,
                error="Changeset validation failed. See validation errors above.",
            )

        self._ctx.log(step_id=step_id, level="info", message="✓ Validation passed")
        self._log_result_summary(result, step_id, indent="  ")
        return OperationResult(status=FileStatus.SUCCESS, result=result)


class ExecuteOperation(ChangesetOperation):
    kind = OperationKind.EXECUTE
    label = "Execution"
    request_label = "API"
    subject = "API"

    def _on_submitted(self, step_id: str) -> None:
        self._ctx.log(step_id=step_id, level="info", message="✓ Changeset submitted successfully")

    def timeout_message(self, timeout_seconds: int) -> str:
        return f"Changeset execution did not complete within {timeout_seconds} seconds"

    def failure_message(self, error: Any) -> str:
        return f"Changeset execution failed: {error}"

    def revoked_message(self) -> str:
        return "Changeset execution was cancelled"

    def _on_success(self, result: Dict[str, Any], step_id: str) -> OperationResult:
        self._ctx.log(step_id=step_id, level="info", message="✓ Changeset executed successfully")
        if result.get("run_id"):
            self._ctx.log(step_id=step_id, level="info", message=f"Run ID: {result['run_id']}")
        self._log_result_summary(result, step_id)
        return OperationResult(status=FileStatus.SUCCESS, result=result)
