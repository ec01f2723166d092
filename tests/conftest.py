# tests/conftest.py
"""
Fixtures compartilhados para testes do InProd Changesets.

Este módulo define fixtures reutilizáveis que fornecem:
- contexto de execução controlado (RunContext)
- fábrica de ExecutionOptions mínimas e determinísticas
- um servidor InProd falso sobre `httpx.MockTransport`
- um sleep que apenas registra as chamadas (sem espera real)
- arquivos de changeset temporários em `tmp_path`

O objetivo destas fixtures é permitir testes do core (payload, remote,
operações e Orchestrator) sem depender de:
- rede
- relógio real
- variáveis de ambiente do runner

Decisões arquiteturais:
    - Helpers de protocolo vivem em `tests/_inprod.py`
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture faz I/O de rede
    - Nenhuma fixture dorme de verdade
    - Todas as fixtures são isoladas por teste

Limites explícitos:
    - Não substituir testes de integração contra um InProd real
    - Não conter lógica de domínio
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from tests._inprod import API_KEY, BASE_URL, FakeInProd, SleepRecorder


@pytest.fixture
def ctx():
    from inprod_changesets.core.context import RunContext

    return RunContext.new(meta={"purpose": "tests"})


@pytest.fixture
def make_options() -> Callable[..., Any]:
    """Fábrica de ExecutionOptions com defaults de teste (timeout curto)."""
    from inprod_changesets.core.config.options import ExecutionOptions

    def _make(**overrides: Any):
        values: Dict[str, Any] = {
            "api_key": API_KEY,
            "base_url": BASE_URL,
            "poll_timeout_seconds": 60,
        }
        values.update(overrides)
        return ExecutionOptions(**values)

    return _make


@pytest.fixture
def fake_inprod() -> FakeInProd:
    return FakeInProd()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def client(fake_inprod):
    from inprod_changesets.core.remote.client import InProdClient

    with InProdClient(base_url=BASE_URL, api_key=API_KEY, transport=fake_inprod.transport) as c:
        yield c


@pytest.fixture
def write_changeset(tmp_path: Path) -> Callable[..., Path]:
    """Grava um changeset em `tmp_path` e devolve o path absoluto."""

    def _write(name: str, content: str = "name: demo\nvariable: []\n") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path.resolve()

    return _write
