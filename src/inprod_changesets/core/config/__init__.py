# src/inprod_changesets/core/config/__init__.py

"""
Camada de configuração do InProd Changesets.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar, validar e identificar a configuração de uma run.

Responsabilidades do pacote:
    - Leitura dos inputs do operador (convenção INPUT_<NOME> da CI + flags)
    - Fallback de credenciais via INPROD_API_KEY / INPROD_BASE_URL
    - Arquivo opcional de configuração (YAML ou JSON) com deep-merge
    - Validação estrutural (credencial, base_url, estratégia)
    - Fingerprint canônico para rastreabilidade

Módulos:
    - errors  → hierarquia ConfigError
    - merge   → deep_merge entre camadas
    - options → ExecutionOptions / ExecutionStrategy / RunConfig
    - loader  → load_config
    - hashing → compute_options_fingerprint

Invariantes:
    - A configuração final é imutável (ExecutionOptions frozen)
    - Erros de configuração surgem antes de qualquer arquivo ser processado
"""
