# tests/core/test_variables.py
"""
Testes do parsing do bloco KEY=VALUE de variáveis do operador.

Os testes asseguram que:
- linhas vazias e comentários são ignorados
- a chave é tudo à esquerda do primeiro `=`, o valor todo o resto
- chaves duplicadas: a última escrita vence
- input vazio produz None (e não um conjunto vazio)
- linhas malformadas são rejeitadas nomeando a linha
"""

import pytest

from inprod_changesets.core.config.errors import ConfigError, InvalidVariablesError
from inprod_changesets.core.variables import VariableSet, parse_variables


def test_parse_basic_block():
    raw = """
        DB_HOST = db.internal
        # comentário

        CONN=postgres://u:p@h/db?sslmode=require
    """
    variables = parse_variables(raw)
    assert variables.to_dict() == {
        "DB_HOST": "db.internal",
        "CONN": "postgres://u:p@h/db?sslmode=require",
    }
    assert variables.names() == ["DB_HOST", "CONN"]


def test_empty_value_is_allowed():
    assert parse_variables("EMPTY=").to_dict() == {"EMPTY": ""}


def test_last_duplicate_wins():
    variables = parse_variables("A=1\nB=2\nA=3")
    assert variables.to_dict() == {"A": "3", "B": "2"}


@pytest.mark.parametrize("raw", [None, "", "   \n\t  "])
def test_blank_input_is_none(raw):
    assert parse_variables(raw) is None


@pytest.mark.parametrize("line", ["JUST_A_NAME", "=value"])
def test_malformed_line_raises(line):
    with pytest.raises(InvalidVariablesError) as exc:
        parse_variables(f"OK=1\n{line}")
    assert line in str(exc.value)
    assert isinstance(exc.value, ConfigError)


def test_variable_set_is_read_only_and_hides_values():
    variables = VariableSet([("TOKEN", "s3cr3t")])
    with pytest.raises(TypeError):
        variables["TOKEN"] = "other"  # type: ignore[index]
    assert "s3cr3t" not in repr(variables)
    assert len(variables) == 1
