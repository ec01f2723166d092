# src/inprod_changesets/core/remote/client.py
"""
Fronteira HTTP com a API InProd.

Este módulo é o único ponto do projeto que fala HTTP. Ele conhece os
endpoints, o header de autenticação e a forma do envelope de resposta,
e traduz falhas de rede/HTTP para a taxonomia de exceções do core.

Contrato remoto (v1):

    POST /api/v1/change-set/change-set/{validate,execute}_{yaml,json}/[?environment=...]
    GET  /api/v1/task-status/{task_id}/

    Authorization: Api-Key <key>   (em todas as requisições)

Regras de erro:
    - submissão com falha de rede → TransportError
    - submissão com status não-2xx → TransportError (status + corpo)
    - poll com status não-2xx → TransportError (fatal para a operação)
    - poll com falha de rede → httpx.RequestError propagado sem tradução;
      o TaskPoller decide tratá-lo como transiente
    - corpo que não é JSON → ProtocolError

Limites explícitos:
    - Não faz retry
    - Não interpreta status de task (ver poller)
    - Nunca registra a credencial
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from inprod_changesets.core.exceptions import ProtocolError, TransportError
from inprod_changesets.core.types import ChangesetFormat


DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

TASK_STATUS_PATH = "/api/v1/task-status/{task_id}/"


class OperationKind(str, Enum):
    VALIDATE = "validate"
    EXECUTE = "execute"


ENDPOINTS: Dict[OperationKind, Dict[ChangesetFormat, str]] = {
    OperationKind.VALIDATE: {
        ChangesetFormat.YAML: "/api/v1/change-set/change-set/validate_yaml/",
        ChangesetFormat.JSON: "/api/v1/change-set/change-set/validate_json/",
    },
    OperationKind.EXECUTE: {
        ChangesetFormat.YAML: "/api/v1/change-set/change-set/execute_yaml/",
        ChangesetFormat.JSON: "/api/v1/change-set/change-set/execute_json/",
    },
}


def endpoint_for(kind: OperationKind, fmt: ChangesetFormat) -> str:
    return ENDPOINTS[kind][fmt]


def build_url(base_url: str, endpoint: str, environment: Optional[str] = None) -> str:
    """Monta a URL final; `environment` (id ou nome) vai URL-encoded na query."""
    query = ""
    if environment:
        query = "?environment=" + quote(str(environment), safe="-_.!~*'()")
    return f"{base_url}{endpoint}{query}"


def _decode_json(response: httpx.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProtocolError(
            message=f"Failed to parse JSON response from {url}: {e}",
            details={"url": url, "status_code": response.status_code},
        ) from e


class InProdClient:
    """
    Cliente síncrono da API InProd sobre `httpx.Client`.

    Uma instância serve uma run inteira; as requisições são sempre
    sequenciais (nunca duas em voo).
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
        http: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "InProdClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _headers(self, content_type: str = "application/json") -> Dict[str, str]:
        return {
            "Authorization": f"Api-Key {self._api_key}",
            "Content-Type": content_type,
        }

    def submit(
        self,
        endpoint: str,
        *,
        body: str,
        content_type: str,
        environment: Optional[str] = None,
        label: str = "API",
    ) -> Any:
        """
        POST de um changeset e devolução do envelope JSON.

        `label` prefixa a mensagem de erro HTTP ("Validation", "API").

        Raises:
            TransportError: Falha de rede ou status não-2xx.
            ProtocolError: Corpo de resposta não-JSON.
        """
        url = build_url(self.base_url, endpoint, environment)
        try:
            response = self._http.post(
                url,
                content=body.encode("utf-8"),
                headers=self._headers(content_type),
            )
        except httpx.RequestError as e:
            raise TransportError(
                message=f"Failed to connect to InProd API at {url}: {e}",
                details={"url": url, "exception_class": e.__class__.__name__},
                hint="Verifique base_url e a conectividade do runner com o InProd",
            ) from e

        if not response.is_success:
            raise TransportError(
                message=(
                    f"{label} request failed with status {response.status_code}: "
                    f"{response.text or response.reason_phrase}"
                ),
                details={"url": url, "status_code": response.status_code},
            )

        return _decode_json(response, url)

    def task_status(self, task_id: str) -> Any:
        """
        GET do status de uma task.

        Raises:
            httpx.RequestError: Falha de rede (transiente para o poller).
            TransportError: Status não-2xx (fatal).
            ProtocolError: Corpo de resposta não-JSON.
        """
        url = self.base_url + TASK_STATUS_PATH.format(task_id=quote(str(task_id), safe=""))
        response = self._http.get(url, headers=self._headers())

        if not response.is_success:
            raise TransportError(
                message=(
                    f"Poll failed with status {response.status_code}: "
                    f"{response.text or response.reason_phrase}"
                ),
                details={"url": url, "status_code": response.status_code, "task_id": task_id},
            )

        return _decode_json(response, url)
