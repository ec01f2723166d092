# src/inprod_changesets/core/engine/aggregate.py
"""
Agregação de resultados e decisão de fail-fast.

Ranking de severidade (à esquerda, pior):

    FAILURE > TIMEOUT > REVOKED > SUBMITTED > SUCCESS

Invariantes:
    - `worst_status([])` é SUCCESS
    - `accumulate` nunca muta a tupla recebida
    - A decisão de parada depende apenas do último resultado e do flag
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from inprod_changesets.core.types import FileResult, FileStatus


STATUS_SEVERITY = {
    FileStatus.FAILURE: 0,
    FileStatus.TIMEOUT: 1,
    FileStatus.REVOKED: 2,
    FileStatus.SUBMITTED: 3,
    FileStatus.SUCCESS: 4,
}

FAILING_STATUSES = frozenset({FileStatus.FAILURE, FileStatus.TIMEOUT, FileStatus.REVOKED})


def worst_status(results: Iterable[FileResult]) -> FileStatus:
    worst = FileStatus.SUCCESS
    for result in results:
        if STATUS_SEVERITY[result.status] < STATUS_SEVERITY[worst]:
            worst = result.status
    return worst


def accumulate(
    results: Tuple[FileResult, ...],
    latest: FileResult,
    *,
    fail_fast: bool,
) -> Tuple[Tuple[FileResult, ...], bool]:
    """Anexa `latest` e devolve `(resultados, deve_parar)`."""
    return results + (latest,), fail_fast and latest.status in FAILING_STATUSES


def failed_results(results: Sequence[FileResult]) -> Tuple[FileResult, ...]:
    return tuple(r for r in results if r.status in FAILING_STATUSES)


def failure_message(failed: Sequence[FileResult], total: int, *, phase: str = "failed") -> str:
    """Erro do único arquivo que falhou, ou um resumo por contagem."""
    if len(failed) == 1:
        return failed[0].error or f"{failed[0].file} {phase}"
    return f"{len(failed)} of {total} changeset(s) {phase}. See result output for details."
