# src/inprod_changesets/core/payload/dialects.py
"""
Dialetos de documento de changeset e a capacidade VariableCollection.

Um changeset InProd existe em dois dialetos com a mesma estrutura lógica:
    - YAML (estruturado em blocos)
    - JSON (objetos aninhados)

Em ambos, as variáveis do changeset vivem na lista de topo `variable`,
cada entrada no formato `{name, value, maskValue, environment}`.

Este módulo isola tudo o que difere entre os dialetos (parse e print) em
adapters finos, e expõe a coleção de variáveis por uma interface mínima
(`matching`, `remove`, `append`) sobre a qual o merge é escrito uma vez.

Invariantes:
    - `parse` sempre devolve um dict (documento vazio → {})
    - `dump(parse(x))` preserva a estrutura do documento
    - Entradas que não são mapeamentos nunca casam com um nome

Limites explícitos:
    - Não preserva comentários nem formatação do YAML original
    - Não valida o restante do schema do changeset
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml  # PyYAML

from inprod_changesets.core.exceptions import ChangesetParseError
from inprod_changesets.core.types import ChangesetFormat


VARIABLES_KEY = "variable"


class VariableCollection:
    """Coleção de VariableEntry sobre a lista `variable` de um documento."""

    def __init__(self, entries: List[Any]):
        self._entries = entries

    @staticmethod
    def _named(entry: Any, name: str) -> bool:
        return isinstance(entry, dict) and entry.get("name") == name

    def matching(self, name: str) -> List[Dict[str, Any]]:
        return [e for e in self._entries if self._named(e, name)]

    def remove(self, name: str) -> None:
        self._entries[:] = [e for e in self._entries if not self._named(e, name)]

    def append(self, entry: Dict[str, Any]) -> None:
        self._entries.append(entry)


class Dialect:
    """Adapter base: parse/print específicos, coleção de variáveis comum."""

    format: ChangesetFormat
    content_type: str

    def parse(self, text: str) -> Dict[str, Any]:
        raise NotImplementedError

    def dump(self, document: Dict[str, Any]) -> str:
        raise NotImplementedError

    def variables(self, document: Dict[str, Any]) -> VariableCollection:
        entries = document.get(VARIABLES_KEY)
        if entries is None:
            entries = []
            document[VARIABLES_KEY] = entries
        if not isinstance(entries, list):
            raise ChangesetParseError(
                message=f"Changeset field '{VARIABLES_KEY}' must be a list, "
                f"got: {type(entries).__name__}",
                details={"format": self.format.value},
            )
        return VariableCollection(entries)

    def _require_mapping(self, data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ChangesetParseError(
                message=f"Changeset root must be a mapping, got: {type(data).__name__}",
                details={"format": self.format.value},
            )
        return data


class _LiteralDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_LiteralDumper.add_representer(str, _represent_str)


def dump_yaml(data: Any) -> str:
    """Serializa em YAML preservando a ordem das chaves; strings multilinha em bloco `|`."""
    return yaml.dump(
        data,
        Dumper=_LiteralDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


class YamlDialect(Dialect):
    format = ChangesetFormat.YAML
    content_type = "application/yaml"

    def parse(self, text: str) -> Dict[str, Any]:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ChangesetParseError(
                message=f"Invalid YAML changeset: {e}",
                details={"format": self.format.value},
            ) from e
        return self._require_mapping(data)

    def dump(self, document: Dict[str, Any]) -> str:
        return dump_yaml(document)


class JsonDialect(Dialect):
    format = ChangesetFormat.JSON
    content_type = "application/json"

    def parse(self, text: str) -> Dict[str, Any]:
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ChangesetParseError(
                message=f"Invalid JSON changeset: {e}",
                details={"format": self.format.value, "line": e.lineno, "column": e.colno},
            ) from e
        return self._require_mapping(data)

    def dump(self, document: Dict[str, Any]) -> str:
        return json.dumps(document, ensure_ascii=False)


DIALECTS: Dict[ChangesetFormat, Dialect] = {
    ChangesetFormat.YAML: YamlDialect(),
    ChangesetFormat.JSON: JsonDialect(),
}


def dialect_for(fmt: ChangesetFormat) -> Dialect:
    return DIALECTS[ChangesetFormat(fmt)]
