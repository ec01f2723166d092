# tests/core/remote/test_client.py
"""
Testes do InProdClient (fronteira HTTP).

Os testes asseguram que:
- o header `Authorization: Api-Key <key>` vai em toda requisição
- `?environment=` é opcional e URL-encoded
- falhas de rede e status não-2xx na submissão viram TransportError
- no poll, status não-2xx é fatal e falha de rede é propagada crua
- corpo não-JSON vira ProtocolError
"""

import httpx
import pytest

from inprod_changesets.core.exceptions import ProtocolError, TransportError
from inprod_changesets.core.remote import build_url

from tests._inprod import API_KEY, BASE_URL, VALIDATE_YAML, connect_error, envelope, task_path


def test_build_url_encodes_environment():
    assert build_url(BASE_URL, VALIDATE_YAML) == BASE_URL + VALIDATE_YAML
    assert (
        build_url(BASE_URL, VALIDATE_YAML, "Prod & DR")
        == BASE_URL + VALIDATE_YAML + "?environment=Prod%20%26%20DR"
    )
    assert build_url(BASE_URL, VALIDATE_YAML, "42").endswith("?environment=42")


def test_submit_sends_auth_content_type_and_body(client, fake_inprod):
    fake_inprod.on("POST", VALIDATE_YAML, envelope("t-1"))

    out = client.submit(
        VALIDATE_YAML,
        body="changeset: x\n",
        content_type="application/yaml",
        environment="Staging",
    )

    assert out == envelope("t-1")
    request = fake_inprod.requests[0]
    assert request.headers["Authorization"] == f"Api-Key {API_KEY}"
    assert request.headers["Content-Type"] == "application/yaml"
    assert request.url.params["environment"] == "Staging"
    assert request.content == b"changeset: x\n"


def test_submit_non_success_status_embeds_code_and_body(client, fake_inprod):
    fake_inprod.on("POST", VALIDATE_YAML, httpx.Response(403, text="Forbidden: bad key"))

    with pytest.raises(TransportError) as exc:
        client.submit(VALIDATE_YAML, body="", content_type="application/yaml", label="Validation")

    assert str(exc.value) == "Validation request failed with status 403: Forbidden: bad key"
    assert exc.value.details["status_code"] == 403


def test_submit_network_fault_is_transport_error(client, fake_inprod):
    fake_inprod.on("POST", VALIDATE_YAML, connect_error)

    with pytest.raises(TransportError, match="Failed to connect to InProd API at"):
        client.submit(VALIDATE_YAML, body="", content_type="application/yaml")


def test_submit_non_json_body_is_protocol_error(client, fake_inprod):
    fake_inprod.on("POST", VALIDATE_YAML, httpx.Response(200, text="<html>"))

    with pytest.raises(ProtocolError):
        client.submit(VALIDATE_YAML, body="", content_type="application/yaml")


def test_task_status(client, fake_inprod):
    fake_inprod.on("GET", task_path("t-1"), {"status": "PENDING"})

    assert client.task_status("t-1") == {"status": "PENDING"}
    assert fake_inprod.requests[0].headers["Authorization"] == f"Api-Key {API_KEY}"


def test_task_status_non_success_is_fatal(client, fake_inprod):
    fake_inprod.on("GET", task_path("t-1"), httpx.Response(500, text="boom"))

    with pytest.raises(TransportError, match="Poll failed with status 500: boom"):
        client.task_status("t-1")


def test_task_status_network_fault_propagates_raw(client, fake_inprod):
    fake_inprod.on("GET", task_path("t-1"), connect_error)

    with pytest.raises(httpx.ConnectError):
        client.task_status("t-1")
