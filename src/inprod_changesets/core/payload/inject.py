# src/inprod_changesets/core/payload/inject.py
"""
PayloadInjector — merge de um VariableSet em um documento de changeset.

Para cada `(name, value)` do VariableSet, na ordem do input:
    1. localiza as entradas existentes com o mesmo `name`
    2. `maskValue` := True se qualquer entrada existente estava mascarada
    3. remove todas essas entradas e anexa uma única entrada nova
       `{name, value, maskValue, environment: None}` (escopo global)

Invariantes:
    - Após o merge existe exatamente uma entrada por nome injetado
    - A máscara nunca é perdida por um override
    - Campos e variáveis não relacionados passam inalterados
    - Injetar o mesmo VariableSet duas vezes não acumula duplicatas
    - O documento de entrada nunca é mutado

Limites explícitos:
    - O algoritmo é escrito uma vez; os dialetos só fornecem parse/print
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Optional

from inprod_changesets.core.types import ChangesetFormat
from inprod_changesets.core.variables import VariableSet

from .dialects import VariableCollection, dialect_for


def _is_masked(entry: Dict[str, Any]) -> bool:
    mask = entry.get("maskValue")
    if isinstance(mask, str):
        return mask.strip().lower() == "true"
    return mask is True


def merge_variables(collection: VariableCollection, variables: VariableSet) -> None:
    """Aplica o VariableSet sobre uma coleção de variáveis, in place."""
    for name, value in variables.items():
        mask = any(_is_masked(entry) for entry in collection.matching(name))
        collection.remove(name)
        collection.append(
            {
                "name": name,
                "value": value,
                "maskValue": mask,
                "environment": None,
            }
        )


def inject(
    document: Dict[str, Any],
    fmt: ChangesetFormat,
    variables: Optional[VariableSet],
) -> Dict[str, Any]:
    """
    Devolve uma cópia de `document` com as variáveis injetadas.

    Um VariableSet ausente ou vazio produz uma cópia inalterada.
    """
    result = deepcopy(document)
    if not variables:
        return result

    merge_variables(dialect_for(fmt).variables(result), variables)
    return result


def inject_text(content: str, fmt: ChangesetFormat, variables: Optional[VariableSet]) -> str:
    """Parse → inject → print no dialeto indicado."""
    dialect = dialect_for(fmt)
    return dialect.dump(inject(dialect.parse(content), fmt, variables))
