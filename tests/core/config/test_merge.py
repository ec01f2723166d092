# tests/core/config/test_merge.py
"""
Testes da política de deep-merge das camadas de configuração.

Este módulo valida o comportamento da função `deep_merge`, usada para
empilhar defaults, variáveis INPROD_*, arquivo --config e inputs.

Os testes asseguram que:
- valores escalares são sobrescritos corretamente
- dicionários são mesclados de forma recursiva (ex.: changeset_variables)
- listas são sobrescritas integralmente
- None no override significa "não informado"
- conflitos de tipo são rejeitados explicitamente
- objetos de entrada não são mutados durante o merge

Limites explícitos:
    - Não valida carregamento de arquivos
    - Não valida a conversão de inputs textuais
"""

import pytest

try:
    from inprod_changesets.core.config.merge import deep_merge
    from inprod_changesets.core.config.errors import ConfigTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que os módulos de merge de config estejam disponíveis para os testes.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config merge modules. Implement:\n"
            "- src/inprod_changesets/core/config/merge.py (deep_merge)\n"
            "- src/inprod_changesets/core/config/errors.py (ConfigTypeConflictError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    """
    Verifica o override de escalares sem mutar as entradas.

    Invariantes:
        - O valor sobrescrito reflete exatamente o override
        - Chaves não sobrescritas permanecem inalteradas
        - `base` e `override` não sofrem mutação
    """
    _require_imports()
    base = {"validate_only": False, "fail_fast": False}
    override = {"fail_fast": True}
    out = deep_merge(base, override)
    assert out == {"validate_only": False, "fail_fast": True}
    assert base == {"validate_only": False, "fail_fast": False}
    assert override == {"fail_fast": True}


def test_merge_nested_dict_merges_variables_by_name():
    """
    Dicionários aninhados são mesclados por chave: uma variável do input
    sobrescreve a homônima do arquivo e preserva as demais.
    """
    _require_imports()
    base = {"changeset_variables": {"DB_HOST": "file-host", "DB_PORT": "5432"}}
    override = {"changeset_variables": {"DB_HOST": "input-host"}}
    out = deep_merge(base, override)
    assert out == {"changeset_variables": {"DB_HOST": "input-host", "DB_PORT": "5432"}}


def test_merge_list_override_total():
    _require_imports()
    out = deep_merge({"tags": ["a", "b"]}, {"tags": ["c"]})
    assert out == {"tags": ["c"]}


def test_merge_none_override_is_ignored():
    _require_imports()
    out = deep_merge({"api_key": "from-defaults"}, {"api_key": None})
    assert out == {"api_key": "from-defaults"}


def test_merge_type_conflict_raises():
    """
    Verifica que conflitos de tipo durante o deep-merge são rejeitados.

    Decisões arquiteturais:
        - O deep-merge é estritamente tipado por chave
        - bool e int são tipos distintos (bool não sobrescreve int)

    Limites explícitos:
        - Não valida mensagens detalhadas da exceção
    """
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"changeset_variables": {}}, {"changeset_variables": "A=1"})
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"polling_timeout_minutes": 10}, {"polling_timeout_minutes": True})
