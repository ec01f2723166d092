# src/inprod_changesets/core/context.py
"""
Contexto de execução compartilhado de uma run.

Este módulo define o `RunContext`, o único canal de observabilidade do
core: resolver, poller, operações e Orchestrator registram eventos
estruturados aqui, e o adapter externo (CLI) decide como apresentá-los.

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Logs são eventos estruturados, não strings livres
    - A formatação de linhas de log é responsabilidade do sink externo

Invariantes:
    - Todo evento inclui `run_id`, `step_id`, `level`, `message` e `timestamp`
    - Eventos são mantidos na ordem em que foram emitidos
    - Warnings são agrupados por `step_id`

Limites explícitos:
    - Não executa operações remotas
    - Não persiste eventos automaticamente
    - Nunca recebe valores de variáveis nem a credencial
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional


RUN_STEP_ID = "run"

LogSink = Callable[[Dict[str, Any]], None]


@dataclass
class RunContext:
    """
    Contexto de observabilidade de uma run.

    Campos:
        - run_id: identificador único da execução
        - created_at: timestamp UTC de criação
        - meta: metadados livres (ex.: fingerprint das opções)
        - sink: callable opcional que recebe cada evento assim que emitido
        - events: eventos estruturados, na ordem de emissão
        - warnings: mensagens não fatais agrupadas por `step_id`

    Convenção de `step_id`:
        - "run" para eventos de escopo global
        - basename do arquivo para eventos de um changeset específico
    """

    run_id: str
    created_at: datetime
    meta: Dict[str, Any] = field(default_factory=dict)
    sink: Optional[LogSink] = field(default=None, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def new(cls, *, sink: Optional[LogSink] = None, meta: Optional[Dict[str, Any]] = None) -> "RunContext":
        return cls(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            meta=dict(meta or {}),
            sink=sink,
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------

    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)
        if self.sink is not None:
            self.sink(event)

    def add_warning(self, *, step_id: str, message: str, **extra: Any) -> None:
        self.warnings.setdefault(step_id, []).append(message)
        self.log(step_id=step_id, level="warning", message=message, **extra)
