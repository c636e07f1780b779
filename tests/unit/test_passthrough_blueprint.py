from unittest.mock import MagicMock

import pytest

from handlers.forwarder import ForwardResponse
from proxy_server import create_app


@pytest.fixture
def mock_forwarder():
    forwarder = MagicMock()
    forwarder.forward.return_value = ForwardResponse(
        status_code=202, content_type="application/json", body=b'{"accepted": true}'
    )
    return forwarder


@pytest.fixture
def passthrough_client(proxy_config, mock_forwarder):
    config = proxy_config.model_copy(update={"passthrough_enabled": True})
    app = create_app(config, token_manager=MagicMock(), forwarder=mock_forwarder)
    return app.test_client()


def test_passthrough_disabled_by_default(proxy_config, mock_forwarder, auth_headers):
    app = create_app(proxy_config, token_manager=MagicMock(), forwarder=mock_forwarder)

    response = app.test_client().get("/papi/v1/customers", headers=auth_headers)

    assert response.status_code == 404
    mock_forwarder.forward.assert_not_called()


def test_passthrough_requires_secret(passthrough_client, mock_forwarder):
    response = passthrough_client.get("/papi/v1/customers")

    assert response.status_code == 401
    mock_forwarder.forward.assert_not_called()


def test_passthrough_relays_method_path_and_query(
    passthrough_client, mock_forwarder, auth_headers
):
    response = passthrough_client.patch(
        "/papi/v1/customers/abc?notify=false&tag=a&tag=b",
        headers={**auth_headers, "X-Request-Id": "rid-1"},
        json={"email": "new@example.com"},
    )

    assert response.status_code == 202
    assert response.get_json() == {"accepted": True}
    fwd = mock_forwarder.forward.call_args[0][0]
    assert fwd.method == "PATCH"
    assert fwd.path == "/v1/customers/abc"
    assert fwd.query == [("notify", "false"), ("tag", "a"), ("tag", "b")]
    assert fwd.headers["X-Request-Id"] == "rid-1"
    assert fwd.raw_body == b'{"email": "new@example.com"}'


def test_passthrough_get_has_no_body(passthrough_client, mock_forwarder, auth_headers):
    passthrough_client.get("/papi/v1/customers", headers=auth_headers)

    assert mock_forwarder.forward.call_args[0][0].raw_body is None
