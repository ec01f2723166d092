# src/inprod_changesets/core/config/loader.py
"""
Loader canônico de configuração do InProd Changesets.

Este módulo resolve a configuração efetiva de uma run a partir de quatro
camadas, da menor para a maior precedência:

    1. defaults embutidos (`DEFAULTS`)
    2. variáveis de ambiente `INPROD_API_KEY` / `INPROD_BASE_URL`
    3. arquivo opcional de configuração (YAML ou JSON, via `--config`)
    4. inputs do operador (`INPUT_<NOME>` da CI e flags da CLI)

Inputs chegam sempre como texto e são convertidos com as regras da
action original:
    - validate_before_execute: verdadeiro exceto quando "false"
    - validate_only / fail_fast: verdadeiros apenas quando "true"
    - polling_timeout_minutes: prefixo inteiro positivo, senão 10
    - changeset_variables: bloco KEY=VALUE (ver core.variables)

Arquivos de configuração usam os mesmos nomes de chave, já tipados
(bool/int/str); `changeset_variables` é um mapeamento nome → valor.

Invariantes:
    - O resultado é sempre um RunConfig validado
    - Camadas de maior precedência nunca são mutadas pelas menores
    - Nenhum request de rede é feito aqui

Limites explícitos:
    - Não resolve arquivos de changeset (ver core.files)
    - Não registra a credencial em lugar algum
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit
import json
import re

import yaml  # PyYAML

from .errors import (
    ConfigError,
    ConfigFileError,
    InvalidBaseUrlError,
    UnsupportedConfigFormatError,
    UnsupportedStrategyError,
)
from .merge import deep_merge
from .options import (
    DEFAULT_POLL_TIMEOUT_MINUTES,
    ExecutionOptions,
    ExecutionStrategy,
    RunConfig,
)
from inprod_changesets.core.variables import VariableSet, parse_variables


DEFAULTS: Dict[str, Any] = {
    "api_key": "",
    "base_url": "",
    "changeset_file": "",
    "environment": "",
    "validate_before_execute": True,
    "validate_only": False,
    "polling_timeout_minutes": DEFAULT_POLL_TIMEOUT_MINUTES,
    "execution_strategy": ExecutionStrategy.PER_FILE.value,
    "fail_fast": False,
    "changeset_variables": {},
}

INPUT_NAMES = tuple(DEFAULTS)

ENV_FALLBACKS = {
    "api_key": "INPROD_API_KEY",
    "base_url": "INPROD_BASE_URL",
}


def read_action_inputs(environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Lê os inputs da action a partir da convenção `INPUT_<NOME>` da CI.

    Valores vazios (após trim) são tratados como não informados.
    """
    inputs: Dict[str, str] = {}
    for name in INPUT_NAMES:
        value = environ.get(f"INPUT_{name.upper()}")
        if value is not None and value.strip():
            inputs[name] = value.strip()
    return inputs


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_minutes(text: str) -> int:
    """Lê o prefixo inteiro ("15.5" → 15, "5m" → 5); sem prefixo → 10."""
    match = _LEADING_INT.match(text)
    if match is None:
        return DEFAULT_POLL_TIMEOUT_MINUTES
    minutes = int(match.group(1))
    return minutes if minutes > 0 else DEFAULT_POLL_TIMEOUT_MINUTES


def coerce_inputs(raw: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    """
    Converte inputs textuais para os tipos das DEFAULTS.

    Raises:
        InvalidVariablesError: Se `changeset_variables` estiver malformado.
    """
    coerced: Dict[str, Any] = {}
    for name, value in raw.items():
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue

        if name == "validate_before_execute":
            coerced[name] = text != "false"
        elif name in ("validate_only", "fail_fast"):
            coerced[name] = text == "true"
        elif name == "polling_timeout_minutes":
            coerced[name] = _parse_minutes(text)
        elif name == "changeset_variables":
            variables = parse_variables(text)
            if variables is not None:
                coerced[name] = variables.to_dict()
        else:
            coerced[name] = text
    return coerced


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Raises:
        ConfigFileError: Arquivo ausente, ilegível, raiz não-dict ou chave desconhecida.
        UnsupportedConfigFormatError: Extensão não suportada.
    """
    if not path.exists():
        raise ConfigFileError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    try:
        if suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        elif suffix == ".json":
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise UnsupportedConfigFormatError(f"Unsupported config format: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigFileError(f"Invalid config file {path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigFileError(
            f"Config root must be a mapping, got: {type(data).__name__}"
        )

    unknown = sorted(set(data) - set(INPUT_NAMES))
    if unknown:
        raise ConfigFileError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    # environment aceita id numérico ou nome
    if isinstance(data.get("environment"), int) and not isinstance(data["environment"], bool):
        data["environment"] = str(data["environment"])

    variables = data.get("changeset_variables")
    if isinstance(variables, dict):
        data["changeset_variables"] = {str(k): str(v) for k, v in variables.items()}

    return data


def _validate_base_url(base_url: str) -> str:
    base_url = base_url.strip().rstrip("/")
    if not base_url:
        raise ConfigError("base_url is required and cannot be empty")

    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidBaseUrlError(f"Invalid base_url format: {base_url}")
    return base_url


def _build_options(effective: Dict[str, Any]) -> ExecutionOptions:
    api_key = str(effective["api_key"]).strip()
    if not api_key:
        raise ConfigError("api_key is required and cannot be empty")

    base_url = _validate_base_url(str(effective["base_url"]))

    try:
        strategy = ExecutionStrategy(effective["execution_strategy"])
    except ValueError:
        raise UnsupportedStrategyError(
            f"Invalid execution_strategy: {effective['execution_strategy']}. "
            f"Expected one of: {', '.join(s.value for s in ExecutionStrategy)}"
        ) from None

    minutes = effective["polling_timeout_minutes"]
    if minutes <= 0:
        minutes = DEFAULT_POLL_TIMEOUT_MINUTES

    variables = effective["changeset_variables"]
    environment = str(effective["environment"]).strip()

    return ExecutionOptions(
        api_key=api_key,
        base_url=base_url,
        environment=environment or None,
        validate_before_execute=effective["validate_before_execute"],
        validate_only=effective["validate_only"],
        poll_timeout_seconds=minutes * 60,
        strategy=strategy,
        fail_fast=effective["fail_fast"],
        variables=VariableSet(variables.items()) if variables else None,
    )


def load_config(
    *,
    inputs: Mapping[str, Optional[str]],
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
) -> RunConfig:
    """
    Carrega e resolve a configuração efetiva da run.

    Args:
        inputs (Mapping[str, Optional[str]]): Inputs textuais do operador.
        environ (Optional[Mapping[str, str]]): Ambiente do processo (fallbacks INPROD_*).
        config_path (Optional[str]): Arquivo opcional de configuração.

    Returns:
        RunConfig: Pattern de arquivos e ExecutionOptions validadas.

    Raises:
        ConfigError: Qualquer input ausente, malformado ou conflitante.
    """
    environ = environ or {}

    effective = dict(DEFAULTS)

    env_layer = {
        name: environ.get(var, "").strip() or None
        for name, var in ENV_FALLBACKS.items()
    }
    effective = deep_merge(effective, env_layer)

    if config_path:
        effective = deep_merge(effective, _load_file(Path(config_path)))

    effective = deep_merge(effective, coerce_inputs(inputs))

    options = _build_options(effective)

    changeset_file = str(effective["changeset_file"]).strip()
    if not changeset_file:
        raise ConfigError("changeset_file is required")

    return RunConfig(changeset_file=changeset_file, options=options)
