"""
InProd Changesets — Canonical Exceptions (v1)

Este módulo define as exceções tipadas levantadas durante a resolução de
arquivos e a conversa com a API InProd.

Objetivo:
- Distinguir falhas de pré-voo (NotFoundError) de falhas por arquivo
  (TransportError, ProtocolError, ChangesetParseError)
- Facilitar o mapeamento determinístico para ErrorPayload
- Carregar a run agregada quando a run inteira falha (RunFailedError)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- A mensagem é curta, humana e aparece literalmente no output `result`.
- Erros de configuração do operador vivem em `core.config.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class ChangesetException(Exception):
    """Base class para exceções internas do InProd Changesets.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Pré-voo
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class NotFoundError(ChangesetException):
    """Pattern sem correspondências ou path literal inexistente."""


# ---------------------------------------------------------------------------
# Por arquivo
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class TransportError(ChangesetException):
    """Falha de rede na submissão ou status HTTP não-2xx (submit ou poll)."""


@dataclass(frozen=True, eq=False)
class ProtocolError(ChangesetException):
    """Envelope de resposta malformado (ex.: task_id ausente)."""


@dataclass(frozen=True, eq=False)
class ChangesetParseError(ChangesetException):
    """Documento de changeset local não pôde ser interpretado no seu dialeto."""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class RunFailedError(ChangesetException):
    """A run terminou com status agregado FAILURE, TIMEOUT ou REVOKED.

    `run_result` carrega o RunResult completo para que o chamador ainda
    consiga publicar os outputs da run antes de encerrar.
    """

    run_result: Any = None
