"""
Tests for blueprints/helpers.py and utils/error_handlers.py.
"""

from unittest.mock import MagicMock

import pytest
from flask import Flask

from blueprints.helpers import get_json_object, relay_response, require_fields, secret_required
from handlers.forwarder import ForwardResponse
from utils.error_handlers import create_error_response, register_error_handlers
from utils.exceptions import (
    AuthorizationError,
    PolicyDisabledError,
    ProxyException,
    TokenExchangeError,
    ValidationError,
)


@pytest.fixture
def app():
    app = Flask(__name__)
    register_error_handlers(app)
    return app


class TestRequireFields:
    def test_returns_values_in_order(self):
        assert require_fields({"b": "2", "a": " 1 "}, "a", "b") == ["1", "2"]

    def test_non_string_values_are_stringified(self):
        assert require_fields({"agentId": 42}, "agentId") == ["42"]

    @pytest.mark.parametrize("payload", [{}, {"a": None}, {"a": ""}, {"a": "   "}])
    def test_missing_raises(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            require_fields(payload, "a")

        assert exc_info.value.details == {"field": "a"}
        assert exc_info.value.status_code == 400

    def test_reports_first_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            require_fields({}, "customerToken", "agentId")

        assert exc_info.value.details == {"field": "customerToken"}


class TestGetJsonObject:
    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({"json": {"a": 1}}, {"a": 1}),
            ({"json": [1, 2]}, {}),
            ({"data": "text"}, {}),
            ({}, {}),
        ],
    )
    def test_only_objects_are_returned(self, app, kwargs, expected):
        with app.test_request_context("/", method="POST", **kwargs):
            assert get_json_object() == expected


class TestSecretRequired:
    def test_wraps_view(self, app):
        ctx = MagicMock()
        ctx.request_validator.validate.return_value = False

        @app.route("/protected")
        @secret_required(lambda: ctx)
        def protected():
            return "ok"

        response = app.test_client().get("/protected")

        assert response.status_code == 401
        assert response.get_json() == {"error": "unauthorized"}

        ctx.request_validator.validate.return_value = True
        assert app.test_client().get("/protected").data == b"ok"
        assert protected.__name__ == "protected"


class TestRelayResponse:
    def test_bytes_status_and_content_type(self, app):
        with app.app_context():
            response = relay_response(
                ForwardResponse(status_code=418, content_type="application/xml", body=b"<a/>")
            )

        assert response.status_code == 418
        assert response.content_type == "application/xml"
        assert response.data == b"<a/>"


class TestErrorHandlers:
    def test_create_error_response(self, app):
        with app.app_context():
            response, status = create_error_response(
                "validation_error", 400, "bad", {"field": "x"}
            )

        assert status == 400
        assert response.get_json() == {
            "error": "validation_error",
            "message": "bad",
            "details": {"field": "x"},
        }

    @pytest.mark.parametrize(
        "exc,status,error",
        [
            (AuthorizationError(), 401, "unauthorized"),
            (ValidationError.missing_field("x"), 400, "validation_error"),
            (PolicyDisabledError("off"), 400, "customer_creation_disabled"),
            (TokenExchangeError("HTTP 400", 400, "secret body"), 502, "token_exchange_failed"),
            (ProxyException(), 500, "proxy_error"),
        ],
    )
    def test_proxy_exceptions_rendered(self, app, exc, status, error):
        @app.route("/boom")
        def boom():
            raise exc

        response = app.test_client().get("/boom")

        assert response.status_code == status
        assert response.get_json()["error"] == error
        assert "secret body" not in response.get_data(as_text=True)

    def test_unexpected_exception_hides_detail(self, app):
        @app.route("/boom")
        def boom():
            raise KeyError("internal-detail")

        response = app.test_client().get("/boom")

        assert response.status_code == 500
        assert "internal-detail" not in response.get_data(as_text=True)
        assert response.get_json()["error"] == "proxy_error"
