# src/inprod_changesets/core/variables.py
"""
VariableSet — variáveis de override fornecidas pelo operador.

O operador informa um bloco de texto no formato KEY=VALUE, uma variável
por linha. Este módulo interpreta esse bloco e produz um mapeamento
ordenado e somente-leitura, consumido pelo PayloadInjector.

Regras de parsing:
    - cada linha é aparada nas bordas
    - linhas vazias e linhas iniciadas por `#` são ignoradas
    - a chave é tudo à esquerda do primeiro `=` (aparada)
    - o valor é tudo à direita do primeiro `=`, inclusive outros `=` (aparado)
    - chave duplicada: a última escrita vence

Invariantes:
    - Um VariableSet nunca é alterado após construído
    - Input vazio ou só com espaços produz `None`, não um conjunto vazio

Limites explícitos:
    - Não interpola nem expande valores
    - Não registra valores em log (apenas nomes e contagem)
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from inprod_changesets.core.config.errors import InvalidVariablesError


class VariableSet(Mapping):
    """Mapeamento ordenado nome → valor bruto, somente-leitura."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Tuple[str, str]] = ()):
        data: Dict[str, str] = {}
        for name, value in items:
            data[name] = value
        self._items = MappingProxyType(data)

    def __getitem__(self, name: str) -> str:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        # valores podem ser segredos
        return f"VariableSet(names={list(self._items)!r})"

    def names(self) -> List[str]:
        return list(self._items)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._items)


def parse_variables(raw: Optional[str]) -> Optional[VariableSet]:
    """
    Interpreta o bloco KEY=VALUE do operador.

    Args:
        raw (Optional[str]): Texto bruto, uma variável por linha.

    Returns:
        Optional[VariableSet]: Conjunto de variáveis, ou None se o input
        estiver vazio ou contiver apenas espaços.

    Raises:
        InvalidVariablesError: Se alguma linha relevante não contiver `=`
        ou tiver chave vazia.
    """
    if raw is None or not raw.strip():
        return None

    items: List[Tuple[str, str]] = []
    for line in raw.strip().splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        key, sep, value = stripped.partition("=")
        if not sep or not key.strip():
            raise InvalidVariablesError(
                "Invalid changeset_variables format. "
                f"Expected KEY=VALUE on each line, got: {stripped}"
            )
        items.append((key.strip(), value.strip()))

    return VariableSet(items)
