# src/inprod_changesets/core/config/errors.py
"""
Exceções canônicas da camada de configuração do InProd Changesets.

Este módulo define a hierarquia oficial de exceções levantadas durante o
carregamento, merge e validação dos inputs do operador.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros de configuração são fatais e surgem antes de qualquer arquivo
      ser processado
    - Mensagens de erro são claras e direcionadas ao operador

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa falha remota ou de um arquivo específico

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Engine, operações remotas ou CLI
"""


class ConfigError(Exception):
    """
    Exceção base para erros de input do operador.

    Cobre input ausente ou malformado (pattern vazio, linha de variável
    inválida, base_url inválida, estratégia desconhecida).

    Limites explícitos:
        - Não representa falha de transporte ou de protocolo
        - Não representa falha semântica reportada pelo InProd
    """


class InvalidVariablesError(ConfigError):
    """
    Bloco `changeset_variables` com linha fora do formato KEY=VALUE.

    A mensagem sempre cita a linha ofensora (já sem espaços nas bordas).
    """


class InvalidBaseUrlError(ConfigError):
    """
    `base_url` sem esquema http(s) ou sem host.

    Decisões arquiteturais:
        - A URL é validada uma única vez, antes da primeira requisição
        - Nenhuma correção automática de esquema é tentada
    """


class UnsupportedStrategyError(ConfigError):
    """Estratégia de execução fora de `per_file` | `validate_first`."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Arquivo de configuração com extensão não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class ConfigFileError(ConfigError):
    """
    Arquivo de configuração ausente, ilegível ou com raiz diferente de dict,
    ou contendo chaves desconhecidas.
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - defaults: {"fail_fast": false}
        - arquivo:  {"fail_fast": "yes"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito

    Limites explícitos:
        - Não realiza coerção ou conversão de tipos
    """
