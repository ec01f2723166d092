# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Este módulo valida a resolução das ExecutionOptions a partir de:
- defaults embutidos
- variáveis de ambiente INPROD_API_KEY / INPROD_BASE_URL
- arquivo opcional de configuração (YAML ou JSON)
- inputs textuais do operador (INPUT_<NOME> e flags)

Os testes asseguram que:
- os defaults produzem opções válidas e previsíveis
- inputs textuais seguem as regras de conversão da action
- a precedência entre camadas é respeitada
- inputs ausentes ou malformados são rejeitados com ConfigError

Invariantes:
    - Nenhuma configuração parcial é retornada em caso de erro
    - Nenhum request de rede é feito pelo loader

Limites explícitos:
    - Não valida resolução de arquivos de changeset
    - Não valida hashing de configuração
"""

from pathlib import Path

import pytest

try:
    from inprod_changesets.core.config.loader import (
        coerce_inputs,
        load_config,
        read_action_inputs,
    )
    from inprod_changesets.core.config.errors import (
        ConfigError,
        ConfigFileError,
        InvalidBaseUrlError,
        InvalidVariablesError,
        UnsupportedConfigFormatError,
        UnsupportedStrategyError,
    )
    from inprod_changesets.core.config.options import ExecutionStrategy
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o loader de configuração e suas exceções tipadas estejam
    disponíveis, falhando com uma mensagem orientada quando não estão.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config loader modules. Implement:\n"
            "- src/inprod_changesets/core/config/loader.py (load_config)\n"
            "- src/inprod_changesets/core/config/errors.py (ConfigError & subclasses)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _inputs(**overrides):
    values = {
        "api_key": "k-123",
        "base_url": "https://inprod.example.com",
        "changeset_file": "changesets/*.yaml",
    }
    values.update(overrides)
    return values


def test_defaults_only():
    """
    Verifica que apenas os inputs obrigatórios produzem as opções padrão.

    Invariantes:
        - validate_before_execute verdadeiro; validate_only e fail_fast falsos
        - timeout de 10 minutos (600 s) e estratégia per_file
        - environment e variables ausentes
    """
    _require_imports()
    config = load_config(inputs=_inputs())
    options = config.options

    assert config.changeset_file == "changesets/*.yaml"
    assert options.api_key == "k-123"
    assert options.base_url == "https://inprod.example.com"
    assert options.environment is None
    assert options.validate_before_execute is True
    assert options.validate_only is False
    assert options.fail_fast is False
    assert options.poll_timeout_seconds == 600
    assert options.strategy is ExecutionStrategy.PER_FILE
    assert options.variables is None


def test_trailing_slash_is_stripped_from_base_url():
    _require_imports()
    config = load_config(inputs=_inputs(base_url="https://inprod.example.com/"))
    assert config.options.base_url == "https://inprod.example.com"


def test_missing_api_key_raises():
    _require_imports()
    with pytest.raises(ConfigError, match="api_key is required and cannot be empty"):
        load_config(inputs=_inputs(api_key="   "))


def test_missing_base_url_raises():
    _require_imports()
    with pytest.raises(ConfigError, match="base_url is required and cannot be empty"):
        load_config(inputs=_inputs(base_url=""))


@pytest.mark.parametrize("url", ["not-a-url", "ftp://inprod.example.com", "https://"])
def test_invalid_base_url_raises(url):
    _require_imports()
    with pytest.raises(InvalidBaseUrlError, match="Invalid base_url format"):
        load_config(inputs=_inputs(base_url=url))


def test_missing_changeset_file_raises():
    _require_imports()
    with pytest.raises(ConfigError, match="changeset_file is required"):
        load_config(inputs=_inputs(changeset_file=""))


def test_env_fallbacks_are_used_when_inputs_are_missing():
    """
    A credencial e o endereço base caem para INPROD_API_KEY / INPROD_BASE_URL
    quando os inputs não informam valor; inputs explícitos vencem.
    """
    _require_imports()
    environ = {"INPROD_API_KEY": "env-key", "INPROD_BASE_URL": "https://env.example.com/"}

    config = load_config(inputs={"changeset_file": "a.yaml"}, environ=environ)
    assert config.options.api_key == "env-key"
    assert config.options.base_url == "https://env.example.com"

    config = load_config(inputs=_inputs(), environ=environ)
    assert config.options.api_key == "k-123"


def test_boolean_inputs_follow_action_rules():
    """
    validate_before_execute só é falso com "false"; validate_only e
    fail_fast só são verdadeiros com "true".
    """
    _require_imports()
    assert coerce_inputs({"validate_before_execute": "false"}) == {"validate_before_execute": False}
    assert coerce_inputs({"validate_before_execute": "no"}) == {"validate_before_execute": True}
    assert coerce_inputs({"validate_only": "TRUE"}) == {"validate_only": False}
    assert coerce_inputs({"fail_fast": "true"}) == {"fail_fast": True}


@pytest.mark.parametrize(
    "minutes, seconds",
    [
        ("5", 300),
        ("15.5", 900),
        ("5m", 300),
        (" 7 ", 420),
        ("0", 600),
        ("-3", 600),
        ("soon", 600),
        ("m5", 600),
    ],
)
def test_polling_timeout_minutes(minutes, seconds):
    _require_imports()
    config = load_config(inputs=_inputs(polling_timeout_minutes=minutes))
    assert config.options.poll_timeout_seconds == seconds


def test_validate_first_strategy():
    _require_imports()
    config = load_config(inputs=_inputs(execution_strategy="validate_first"))
    assert config.options.strategy is ExecutionStrategy.VALIDATE_FIRST


def test_unknown_strategy_raises():
    _require_imports()
    with pytest.raises(UnsupportedStrategyError):
        load_config(inputs=_inputs(execution_strategy="parallel"))


def test_variables_are_parsed_into_a_variable_set():
    _require_imports()
    config = load_config(inputs=_inputs(changeset_variables="A=1\n# note\nB = x=y\n"))
    variables = config.options.variables
    assert variables.to_dict() == {"A": "1", "B": "x=y"}


def test_malformed_variables_raise():
    _require_imports()
    with pytest.raises(InvalidVariablesError, match="NO_EQUALS"):
        load_config(inputs=_inputs(changeset_variables="A=1\nNO_EQUALS"))


def test_read_action_inputs_uses_input_convention():
    _require_imports()
    environ = {
        "INPUT_API_KEY": " k ",
        "INPUT_CHANGESET_FILE": "a.yaml",
        "INPUT_ENVIRONMENT": "   ",
        "OTHER": "ignored",
    }
    assert read_action_inputs(environ) == {"api_key": "k", "changeset_file": "a.yaml"}


def test_config_file_is_merged_below_inputs(tmp_path: Path):
    """
    Verifica que o arquivo de configuração sobrescreve os defaults, e que
    os inputs sobrescrevem o arquivo.

    Decisões arquiteturais:
        - O arquivo usa os mesmos nomes de input, já tipados
        - environment numérico é aceito e normalizado para texto
        - changeset_variables é um mapeamento mesclado por nome
    """
    _require_imports()
    cfg = tmp_path / "inprod.yaml"
    cfg.write_text(
        "environment: 42\n"
        "fail_fast: true\n"
        "polling_timeout_minutes: 2\n"
        "changeset_variables:\n"
        "  DB_HOST: file-host\n"
        "  DB_PORT: 5432\n",
        encoding="utf-8",
    )

    config = load_config(
        inputs=_inputs(changeset_variables="DB_HOST=input-host", polling_timeout_minutes="3"),
        config_path=str(cfg),
    )
    options = config.options

    assert options.environment == "42"
    assert options.fail_fast is True
    assert options.poll_timeout_seconds == 180
    assert options.variables.to_dict() == {"DB_HOST": "input-host", "DB_PORT": "5432"}


def test_json_config_file(tmp_path: Path):
    _require_imports()
    cfg = tmp_path / "inprod.json"
    cfg.write_text('{"execution_strategy": "validate_first"}', encoding="utf-8")
    config = load_config(inputs=_inputs(), config_path=str(cfg))
    assert config.options.strategy is ExecutionStrategy.VALIDATE_FIRST


def test_config_file_errors(tmp_path: Path):
    _require_imports()
    with pytest.raises(ConfigFileError):
        load_config(inputs=_inputs(), config_path=str(tmp_path / "missing.yaml"))

    root_list = tmp_path / "list.yaml"
    root_list.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigFileError):
        load_config(inputs=_inputs(), config_path=str(root_list))

    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("retries: 3\n", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="retries"):
        load_config(inputs=_inputs(), config_path=str(unknown))

    toml = tmp_path / "inprod.toml"
    toml.write_text("fail_fast = true\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(inputs=_inputs(), config_path=str(toml))
