# src/inprod_changesets/core/engine/orchestrator.py
"""
Orchestrator — estratégias multi-arquivo do InProd Changesets.

O Orchestrator sequencia operações Validate/Execute sobre a lista
ordenada de arquivos e consolida o resultado da run.

Estratégias:
    - per_file (padrão): para cada arquivo, validate (se habilitado) →
      para se falhou → execute (a menos que validate_only)
    - validate_first: valida todos os arquivos; se qualquer validação
      falhou, nenhum arquivo é executado e a run termina em FAILURE;
      caso contrário executa todos sem revalidar. Só se aplica quando a
      validação está habilitada e não é validate_only; senão, per_file.

Política de erro:
    - Exceções por arquivo viram FileResult FAILURE com a mensagem do
      ErrorPayload; os arquivos seguintes ainda rodam (salvo fail_fast)
    - fail_fast só impede o *início* do próximo arquivo/fase
    - Status agregado FAILURE/TIMEOUT/REVOKED → RunFailedError, levantado
      uma única vez, depois de todos os arquivos pretendidos

Invariantes:
    - Execução estritamente sequencial, nunca concorrente
    - A lista de resultados só cresce, na ordem de processamento
    - Cada FileResult é imutável após anexado
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

from inprod_changesets.core.config.options import ExecutionOptions, ExecutionStrategy
from inprod_changesets.core.context import RUN_STEP_ID, RunContext
from inprod_changesets.core.errors import exception_to_error
from inprod_changesets.core.exceptions import RunFailedError
from inprod_changesets.core.operations import ExecuteOperation, ValidateOperation
from inprod_changesets.core.remote.client import InProdClient
from inprod_changesets.core.remote.poller import POLL_INTERVAL_SECONDS, TaskPoller
from inprod_changesets.core.types import ChangesetFile, FileResult, FileStatus

from .aggregate import FAILING_STATUSES, accumulate, failed_results, failure_message, worst_status


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma run: status pior-caso + resultados por arquivo."""

    status: FileStatus
    results: Tuple[FileResult, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> bool:
        return self.status in FAILING_STATUSES

    def to_list(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.results]


class Orchestrator:
    """Sequenciador de changesets (estratégia + fail-fast + agregação)."""

    def __init__(
        self,
        *,
        options: ExecutionOptions,
        ctx: RunContext,
        validator: ValidateOperation,
        executor: ExecuteOperation,
    ):
        self.options = options
        self.ctx = ctx
        self.validator = validator
        self.executor = executor

    @classmethod
    def from_client(
        cls,
        *,
        options: ExecutionOptions,
        ctx: RunContext,
        client: InProdClient,
        sleep: Callable[[float], None] = time.sleep,
        interval: float = POLL_INTERVAL_SECONDS,
    ) -> "Orchestrator":
        poller = TaskPoller(client, ctx=ctx, interval=interval, sleep=sleep)
        return cls(
            options=options,
            ctx=ctx,
            validator=ValidateOperation(client, poller, ctx),
            executor=ExecuteOperation(client, poller, ctx),
        )

    # ------------------------------------------------------------------
    # Passos por arquivo
    # ------------------------------------------------------------------

    def _guarded(self, changeset: ChangesetFile, action: Callable[[], FileResult]) -> FileResult:
        """Converte qualquer exceção do arquivo em FileResult FAILURE."""
        try:
            return action()
        except Exception as e:
            error = exception_to_error(e)
            self.ctx.log(
                step_id=changeset.name,
                level="error",
                message=error.message,
                error=error.to_dict(),
            )
            return FileResult.failed(changeset, error.message)

    def _process(self, changeset: ChangesetFile, *, validate: bool) -> FileResult:
        self.ctx.log(step_id=changeset.name, level="info", message=f"Read changeset from file: {changeset.name}")

        if validate:
            self.ctx.log(step_id=changeset.name, level="info", message="Validating changeset...")
            validation = self.validator.submit(changeset, self.options)
            if not validation.ok or self.options.validate_only:
                return FileResult.from_operation(changeset, validation)

        self.ctx.log(step_id=changeset.name, level="info", message="Submitting changeset for execution...")
        return FileResult.from_operation(changeset, self.executor.submit(changeset, self.options))

    def _validate_only_step(self, changeset: ChangesetFile) -> FileResult:
        return FileResult.from_operation(changeset, self.validator.submit(changeset, self.options))

    def _run_phase(
        self,
        files: Sequence[ChangesetFile],
        step: Callable[[ChangesetFile], FileResult],
        *,
        title: str,
        outcome: str = "failed",
    ) -> Tuple[FileResult, ...]:
        """Roda `step` em ordem até o fim ou até o fail-fast interromper."""
        results: Tuple[FileResult, ...] = ()
        total = len(files)
        for index, changeset in enumerate(files, start=1):
            self.ctx.log(
                step_id=RUN_STEP_ID,
                level="info",
                message=f"--- {title} [{index}/{total}]: {changeset.name} ---",
            )
            latest = self._guarded(changeset, lambda: step(changeset))
            results, should_stop = accumulate(results, latest, fail_fast=self.options.fail_fast)
            if should_stop:
                self.ctx.log(
                    step_id=RUN_STEP_ID,
                    level="error",
                    message=f"Stopping: fail_fast is enabled and {changeset.name} {outcome}.",
                )
                break
        return results

    # ------------------------------------------------------------------
    # Estratégias
    # ------------------------------------------------------------------

    def _uses_validate_first(self) -> bool:
        o = self.options
        return (
            o.strategy is ExecutionStrategy.VALIDATE_FIRST
            and o.validate_before_execute
            and not o.validate_only
        )

    def _per_file(self, files: Sequence[ChangesetFile]) -> Tuple[FileResult, ...]:
        validate = self.options.validation_enabled
        results = self._run_phase(
            files,
            lambda changeset: self._process(changeset, validate=validate),
            title="Processing",
        )
        return results

    def _validate_first(self, files: Sequence[ChangesetFile]) -> Tuple[FileResult, ...]:
        validations = self._run_phase(
            files,
            self._validate_only_step,
            title="Validating",
            outcome="failed validation",
        )

        failed = tuple(r for r in validations if r.status is not FileStatus.SUCCESS)
        if failed:
            run_result = RunResult(status=FileStatus.FAILURE, results=failed)
            message = failure_message(failed, len(files), phase="failed validation")
            self.ctx.log(step_id=RUN_STEP_ID, level="error", message=message)
            raise RunFailedError(
                message=message,
                details={"phase": "validate", "failed": len(failed), "total": len(files)},
                run_result=run_result,
            )

        self.ctx.log(
            step_id=RUN_STEP_ID,
            level="info",
            message=f"✓ All {len(files)} file(s) passed validation. Starting execution...",
        )
        results = self._run_phase(
            files,
            lambda changeset: self._process(changeset, validate=False),
            title="Executing",
        )
        return results

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, files: Sequence[ChangesetFile]) -> RunResult:
        """
        Processa `files` na ordem recebida e agrega os resultados.

        Raises:
            RunFailedError: Status agregado FAILURE, TIMEOUT ou REVOKED.
        """
        if self._uses_validate_first():
            results = self._validate_first(files)
        else:
            results = self._per_file(files)

        run_result = RunResult(status=worst_status(results), results=results)
        self.ctx.log(
            step_id=RUN_STEP_ID,
            level="info",
            message=f"Run completed with status: {run_result.status.value}",
        )

        if run_result.failed:
            failed = failed_results(results)
            raise RunFailedError(
                message=failure_message(failed, len(results)),
                details={"failed": len(failed), "total": len(results)},
                run_result=run_result,
            )

        return run_result
