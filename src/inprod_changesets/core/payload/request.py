# src/inprod_changesets/core/payload/request.py
"""Corpo da requisição de submissão (validate/execute) para um changeset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from inprod_changesets.core.types import ChangesetFile, ChangesetFormat
from inprod_changesets.core.variables import VariableSet

from .dialects import dialect_for, dump_yaml
from .inject import inject


@dataclass(frozen=True)
class SubmissionBody:
    content: str
    content_type: str


def build_submission(
    changeset: ChangesetFile,
    content: str,
    variables: Optional[VariableSet],
) -> SubmissionBody:
    """
    Monta o corpo enviado ao endpoint do dialeto do arquivo.

    - YAML: o texto bruto vai intacto em `changeset` (bloco literal), com
      as variáveis como mapeamento `variables` quando houver.
    - JSON: o documento é interpretado, recebe as variáveis via `inject`
      e é re-serializado como corpo.

    Raises:
        ChangesetParseError: Se o documento JSON não puder ser interpretado.
    """
    if changeset.format is ChangesetFormat.JSON:
        dialect = dialect_for(ChangesetFormat.JSON)
        document = inject(dialect.parse(content), ChangesetFormat.JSON, variables)
        return SubmissionBody(content=dialect.dump(document), content_type=dialect.content_type)

    wrapper: Dict[str, Any] = {"changeset": content}
    if variables:
        wrapper["variables"] = variables.to_dict()
    return SubmissionBody(
        content=dump_yaml(wrapper),
        content_type=dialect_for(ChangesetFormat.YAML).content_type,
    )
