# src/inprod_changesets/core/files/resolver.py
"""
FileResolver — expansão de path/glob em lista ordenada de changesets.

A ordem de execução é controlada pelo nome dos arquivos: resultados de
glob são ordenados pelo basename, lexicograficamente, em ordem
ascendente. Operadores usam prefixos numéricos (`01_`, `02_`, ...) para
fixar a sequência.

Regras:
    - pattern vazio → ConfigError
    - pattern com metacaracteres `* ? [ ] { }` → glob (sem diretórios);
      zero correspondências → NotFoundError
    - caso contrário → path literal; inexistente → NotFoundError
    - grupos `{a,b}` são expandidos antes do glob; `**` é recursivo
    - barras invertidas são normalizadas para `/` antes do glob

Invariantes:
    - Todos os paths devolvidos são absolutos e normalizados, sem seguir
      symlinks (nome e formato vêm do path encontrado, não do alvo)
    - Um mesmo path nunca aparece duas vezes (links distintos para o
      mesmo alvo contam como arquivos distintos)
    - Empates de basename são resolvidos pelo path completo

Limites explícitos:
    - Não lê o conteúdo dos arquivos
    - Não filtra por extensão (o formato é derivado depois)
"""

from __future__ import annotations

import glob
import os
import re
from pathlib import Path
from typing import Dict, List, Optional

from inprod_changesets.core.config.errors import ConfigError
from inprod_changesets.core.context import RUN_STEP_ID, RunContext
from inprod_changesets.core.exceptions import NotFoundError
from inprod_changesets.core.types import ChangesetFile


_GLOB_CHARS = re.compile(r"[*?\[\]{}]")


def is_glob_pattern(pattern: str) -> bool:
    return bool(_GLOB_CHARS.search(pattern))


def _split_alternatives(body: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current = ""
    for ch in body:
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        current += ch
    parts.append(current)
    return parts


def expand_braces(pattern: str) -> List[str]:
    """
    Expande grupos `{a,b,...}` (inclusive aninhados) em patterns simples.

    Grupos sem vírgula ou sem fechamento permanecem literais.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        end = -1
        for index in range(start, len(pattern)):
            if pattern[index] == "{":
                depth += 1
            elif pattern[index] == "}":
                depth -= 1
                if depth == 0:
                    end = index
                    break
        if end == -1:
            return [pattern]

        alternatives = _split_alternatives(pattern[start + 1:end])
        if len(alternatives) > 1:
            head, tail = pattern[:start], pattern[end + 1:]
            expanded: List[str] = []
            for alternative in alternatives:
                expanded.extend(expand_braces(head + alternative + tail))
            return expanded

        start = pattern.find("{", start + 1)

    return [pattern]


def _glob_files(pattern: str) -> List[Path]:
    normalized = pattern.replace("\\", "/")
    found: Dict[str, Path] = {}
    for candidate in expand_braces(normalized):
        for match in glob.glob(str(Path(candidate).expanduser()), recursive=True):
            path = Path(match)
            if not path.is_file():
                continue
            absolute = Path(os.path.abspath(path))
            found.setdefault(str(absolute), absolute)
    return sorted(found.values(), key=lambda p: (p.name, str(p)))


def resolve_files(pattern: Optional[str], ctx: Optional[RunContext] = None) -> List[ChangesetFile]:
    """
    Resolve o input `changeset_file` em uma lista ordenada de ChangesetFile.

    Args:
        pattern (Optional[str]): Path literal ou glob.
        ctx (Optional[RunContext]): Contexto para eventos de log.

    Returns:
        List[ChangesetFile]: Arquivos na ordem de execução.

    Raises:
        ConfigError: Se o pattern estiver vazio.
        NotFoundError: Se nada corresponder ou o path literal não existir.
    """
    if pattern is None or not pattern.strip():
        raise ConfigError("changeset_file is required")

    pattern = pattern.strip()

    if is_glob_pattern(pattern):
        paths = _glob_files(pattern)
        if not paths:
            raise NotFoundError(
                message=f"No files matched the pattern: {pattern}",
                details={"pattern": pattern},
                hint="Verifique o pattern e o diretório de trabalho da run",
            )
        if ctx is not None:
            ctx.log(
                step_id=RUN_STEP_ID,
                level="info",
                message=f"Matched {len(paths)} file(s) for pattern: {pattern}",
            )
            for index, path in enumerate(paths, start=1):
                ctx.log(step_id=RUN_STEP_ID, level="info", message=f"  [{index}] {path.name}")
        return [ChangesetFile.from_path(p) for p in paths]

    path = Path(os.path.abspath(Path(pattern).expanduser()))
    if not path.exists():
        raise NotFoundError(
            message=f"Changeset file not found: {path}",
            details={"path": str(path)},
        )
    if not path.is_file():
        raise NotFoundError(
            message=f"Changeset path is not a file: {path}",
            details={"path": str(path)},
            hint="Use um glob (ex.: changesets/*.yaml) para processar um diretório",
        )
    return [ChangesetFile.from_path(path)]
