# src/inprod_changesets/core/types.py
"""
Tipos canônicos do InProd Changesets.

Este módulo define as estruturas e enums que padronizam a comunicação
entre FileResolver, operações remotas, Orchestrator e outputs da run.

Componentes principais:
    - ChangesetFormat → dialeto do documento (YAML / JSON)
    - FileStatus      → estados finais de um arquivo processado
    - ChangesetFile   → arquivo resolvido (path absoluto + formato)
    - OperationResult → resultado de uma operação validate/execute
    - FileResult      → resultado imutável por arquivo, consumido pelos outputs

Invariantes:
    - Enums possuem valores textuais canônicos (usados nos outputs)
    - Resultados são frozen e nunca alterados após criados
    - Nenhuma lógica de execução vive neste módulo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class ChangesetFormat(str, Enum):
    """
    Dialeto de um documento de changeset.

    O formato é derivado uma única vez a partir da extensão do arquivo:
        - `.json` → JSON (dialeto de objetos aninhados)
        - qualquer outra extensão, inclusive desconhecida → YAML

    Limites explícitos:
        - Não inspeciona o conteúdo do arquivo para inferir o formato
    """
    YAML = "yaml"
    JSON = "json"

    @classmethod
    def from_path(cls, path: Path) -> "ChangesetFormat":
        if path.suffix.lower() == ".json":
            return cls.JSON
        return cls.YAML


class FileStatus(str, Enum):
    """
    Estados finais possíveis para um arquivo de changeset.

    Estados definidos:
        - SUCCESS: operação concluída com sucesso
        - FAILURE: falha remota, de transporte ou de protocolo
        - REVOKED: task cancelada no servidor
        - TIMEOUT: orçamento de polling esgotado sem estado terminal
        - SUBMITTED: submetido sem acompanhamento até o estado terminal

    Invariantes:
        - O valor textual é estável e aparece literalmente no output `status`
    """
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    REVOKED = "REVOKED"
    TIMEOUT = "TIMEOUT"
    SUBMITTED = "SUBMITTED"


@dataclass(frozen=True)
class ChangesetFile:
    """Arquivo de changeset resolvido: path absoluto e dialeto."""

    path: Path
    format: ChangesetFormat

    @classmethod
    def from_path(cls, path: Path) -> "ChangesetFile":
        return cls(path=path, format=ChangesetFormat.from_path(path))

    @property
    def name(self) -> str:
        return self.path.name

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class OperationResult:
    """
    Resultado de uma operação (Validate ou Execute) sobre um único arquivo.

    Campos:
        - status: estado final da operação
        - result: payload devolvido pela task remota (vazio em falhas)
        - error: mensagem humana quando `status` não é SUCCESS
    """

    status: FileStatus
    result: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FileStatus.SUCCESS


@dataclass(frozen=True)
class FileResult:
    """
    Resultado imutável do processamento de um arquivo na run.

    Cada FileResult é anexado uma única vez à lista de resultados da run,
    na ordem de processamento, e serializado no output `result`.

    Campos:
        - file: basename do arquivo processado
        - status: estado final (ver FileStatus)
        - result: payload da última operação executada
        - error: mensagem de erro, ou None em caso de sucesso
    """

    file: str
    status: FileStatus
    result: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def from_operation(cls, changeset: ChangesetFile, outcome: OperationResult) -> "FileResult":
        return cls(
            file=changeset.name,
            status=outcome.status,
            result=dict(outcome.result or {}),
            error=outcome.error,
        )

    @classmethod
    def failed(cls, changeset: ChangesetFile, error: str) -> "FileResult":
        return cls(file=changeset.name, status=FileStatus.FAILURE, result={}, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "status": self.status.value,
            "result": dict(self.result or {}),
            "error": self.error or None,
        }
