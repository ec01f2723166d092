# src/inprod_changesets/core/config/hashing.py
"""
Fingerprint canônico das ExecutionOptions.

O fingerprint identifica a configuração efetiva de uma run nos eventos de
log, permitindo comparar duas execuções sem expor a credencial nem os
valores das variáveis.

Política de hashing (v1):
    - Base: `ExecutionOptions.public_view()` (sem api_key, só nomes de variáveis)
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - SHA-256 em hexadecimal
"""

import hashlib
import json

from .options import ExecutionOptions


def compute_options_fingerprint(options: ExecutionOptions) -> str:
    """
    Gera o fingerprint SHA-256 das opções públicas da run.

    Raises:
        TypeError: Se o objeto fornecido não for ExecutionOptions.
    """
    if not isinstance(options, ExecutionOptions):
        raise TypeError(
            f"Fingerprint requer ExecutionOptions, recebido: {type(options).__name__}"
        )

    canonical_json = json.dumps(
        options.public_view(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
