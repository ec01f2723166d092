"""
InProd Changesets — Canonical Error Structures (v1)

Este módulo define o payload canônico de erro usado quando uma exceção
por arquivo é convertida em FileResult, e quando a CLI reporta a falha
final da run.

Erros devem ser:

- explícitos
- serializáveis
- acionáveis

Nenhuma exceção por arquivo derruba a run: ela vira um ErrorPayload.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from inprod_changesets.core.config.errors import ConfigError
from inprod_changesets.core.exceptions import ChangesetException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro.

    Campos:
    - type: código estável do erro (nome da classe ou código do catálogo)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
FILE_READ_ERROR = "FILE_READ_ERROR"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


def exception_to_error(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - ChangesetException: já vem com message/details/hint.
    - ConfigError: erro do operador, mensagem preservada.
    - OSError: falha ao ler o arquivo local.
    - Outras exceções: encapsuladas como UNEXPECTED_ERROR sem stack trace.
    """
    if isinstance(exc, ChangesetException):
        return ErrorPayload(
            type=exc.__class__.__name__,
            message=str(exc) or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    if isinstance(exc, ConfigError):
        return ErrorPayload(
            type=CONFIGURATION_ERROR,
            message=str(exc),
            details={"exception_class": exc.__class__.__name__},
            hint="Revise os inputs da action ou o arquivo de configuração",
        )

    if isinstance(exc, OSError):
        return ErrorPayload(
            type=FILE_READ_ERROR,
            message=f"Failed to read changeset file: {exc}",
            details={
                "exception_class": exc.__class__.__name__,
                "filename": getattr(exc, "filename", None),
            },
            hint="Verifique permissões e o encoding (UTF-8) do arquivo",
        )

    return ErrorPayload(
        type=UNEXPECTED_ERROR,
        message=str(exc) or "Erro inesperado durante a execução",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log de debug da run",
    )
