# src/inprod_changesets/core/config/merge.py
"""
Deep-merge das camadas de configuração do InProd Changesets.

As ExecutionOptions são resolvidas empilhando camadas, da menor para a
maior precedência:

    defaults embutidos → variáveis INPROD_* → arquivo --config → inputs

Política de merge (v1):
    - dict → merge recursivo por chave (ex.: `changeset_variables`)
    - list → sobrescrita total
    - None no override → chave tratada como "não informada"
    - escalar → sobrescrita direta
    - conflito de tipos → ConfigTypeConflictError

Invariantes:
    - Nenhum input é mutado
    - A ordem de inserção das chaves da base é preservada; chaves novas
      do override entram no final, na ordem do override
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplica `override` sobre `base` e devolve um novo dicionário.

    Args:
        base (Dict[str, Any]): Camada de menor precedência.
        override (Dict[str, Any]): Camada de maior precedência.

    Returns:
        Dict[str, Any]: Nova configuração resultante.

    Raises:
        ConfigTypeConflictError: Se uma mesma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if override_value is None:
            continue

        if key not in result or result[key] is None:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # bool é subclasse de int: comparar tipos exatos
        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
