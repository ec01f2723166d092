# src/inprod_changesets/core/outputs.py
"""
Outputs da run: `status` e `result`.

    status → valor textual do FileStatus agregado
    result → array JSON de `{file, status, result, error}`, na ordem de
             processamento

Quando a CI fornece um arquivo de outputs (`GITHUB_OUTPUT`), os valores
são anexados nele; `result` usa o formato multilinha com delimitador:

    result<<ghadelimiter_<uuid>
    [...]
    ghadelimiter_<uuid>

Sem arquivo de outputs, as linhas vão para o stream informado.
"""

from __future__ import annotations

import json
import sys
import uuid
from pathlib import Path
from typing import Iterable, Optional, TextIO

from inprod_changesets.core.types import FileResult, FileStatus


OUTPUT_FILE_ENV = "GITHUB_OUTPUT"


def render_results(results: Iterable[FileResult]) -> str:
    return json.dumps([r.to_dict() for r in results], indent=2, default=str)


def _format_output(name: str, value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    # o delimitador não pode aparecer no valor
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(
    status: FileStatus,
    results: Iterable[FileResult],
    *,
    output_path: Optional[str] = None,
    stream: TextIO = sys.stdout,
) -> None:
    """Publica `status` e `result` no arquivo de outputs da CI ou em `stream`."""
    block = f"status={status.value}\n" + _format_output("result", render_results(results))

    if output_path:
        with Path(output_path).open("a", encoding="utf-8") as f:
            f.write(block)
        return

    stream.write(block)
