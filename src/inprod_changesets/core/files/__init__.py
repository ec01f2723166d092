"""Resolução de arquivos de changeset (path literal ou glob ordenado por basename)."""

from .resolver import expand_braces, is_glob_pattern, resolve_files

__all__ = ["expand_braces", "is_glob_pattern", "resolve_files"]
