# src/inprod_changesets/__init__.py
"""
InProd Changesets — deploy determinístico de changesets em ambientes InProd.

Este pacote raiz define o namespace público do projeto, uma ferramenta de
CI que submete bundles de configuração versionados ("changesets") a um
ambiente InProd remoto através do protocolo validate/execute/poll.

Princípios centrais:
    - Arquivos são processados um de cada vez, em ordem determinística
    - Falhas por arquivo são valores (FileResult), não exceções
    - Apenas erros de configuração e pré-voo interrompem a run antes do início
    - Nenhuma submissão concorrente é feita contra o mesmo ambiente

Arquitetura em alto nível:
    - core.config    → carregamento, merge e validação das ExecutionOptions
    - core.files     → resolução de path/glob em lista ordenada de changesets
    - core.payload   → injeção de variáveis nos dois dialetos (YAML / JSON)
    - core.remote    → fronteira HTTP com a API InProd e polling de tasks
    - core.engine    → estratégias multi-arquivo e agregação de status
    - cli            → adapter de linha de comando / CI
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
