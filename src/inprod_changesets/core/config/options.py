# src/inprod_changesets/core/config/options.py
"""
ExecutionOptions — configuração resolvida de uma run.

Estrutura imutável passada a toda operação (Validate / Execute) e ao
Orchestrator. É construída uma única vez pelo loader e nunca alterada.

Invariantes:
    - `base_url` nunca termina com `/`
    - `poll_timeout_seconds` é sempre positivo
    - `api_key` não aparece em `repr()` nem em `public_view()`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from inprod_changesets.core.variables import VariableSet


DEFAULT_POLL_TIMEOUT_MINUTES = 10


class ExecutionStrategy(str, Enum):
    """
    Estratégias multi-arquivo.

    - PER_FILE: validate → execute para cada arquivo, em ordem
    - VALIDATE_FIRST: valida todos; executa todos apenas se nenhum falhou
    """
    PER_FILE = "per_file"
    VALIDATE_FIRST = "validate_first"


@dataclass(frozen=True)
class ExecutionOptions:
    api_key: str = field(repr=False)
    base_url: str
    environment: Optional[str] = None
    validate_before_execute: bool = True
    validate_only: bool = False
    poll_timeout_seconds: int = DEFAULT_POLL_TIMEOUT_MINUTES * 60
    strategy: ExecutionStrategy = ExecutionStrategy.PER_FILE
    fail_fast: bool = False
    variables: Optional[VariableSet] = None

    @property
    def validation_enabled(self) -> bool:
        return self.validate_only or self.validate_before_execute

    def public_view(self) -> Dict[str, Any]:
        """Visão serializável sem credencial e sem valores de variáveis."""
        return {
            "base_url": self.base_url,
            "environment": self.environment,
            "validate_before_execute": self.validate_before_execute,
            "validate_only": self.validate_only,
            "poll_timeout_seconds": self.poll_timeout_seconds,
            "strategy": self.strategy.value,
            "fail_fast": self.fail_fast,
            "variables": self.variables.names() if self.variables else [],
        }


@dataclass(frozen=True)
class RunConfig:
    """Par (pattern de arquivos, ExecutionOptions) produzido pelo loader."""

    changeset_file: str
    options: ExecutionOptions
