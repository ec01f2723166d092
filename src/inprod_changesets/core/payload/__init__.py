"""
Payload de changesets: dialetos, injeção de variáveis e corpo de submissão.

Componentes:
    - dialects → parse/print YAML e JSON + VariableCollection
    - inject   → merge de VariableSet preservando `maskValue`
    - request  → corpo HTTP por dialeto
"""

from .dialects import VARIABLES_KEY, VariableCollection, dialect_for
from .inject import inject, inject_text, merge_variables
from .request import SubmissionBody, build_submission

__all__ = [
    "VARIABLES_KEY",
    "VariableCollection",
    "dialect_for",
    "inject",
    "inject_text",
    "merge_variables",
    "SubmissionBody",
    "build_submission",
]
