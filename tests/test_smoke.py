# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do InProd Changesets.

Este módulo contém testes mínimos cujo único objetivo é garantir que:
- o pacote pode ser importado
- o ambiente de testes (pytest) está funcional
- a CLI expõe os subcomandos esperados

Limites explícitos:
    - Não testar lógica de negócio
    - Não fazer requisições, nem mesmo falsas
"""

import pytest


def test_smoke():
    """
    Smoke test mínimo do repositório: o pacote importa e tem versão.
    """
    import inprod_changesets

    assert inprod_changesets.__version__


def test_cli_help_lists_subcommands(capsys):
    from inprod_changesets.cli import main

    with pytest.raises(SystemExit) as exc:
        main(["--help"])

    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "run" in out
    assert "render" in out
