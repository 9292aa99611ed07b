from fastapi import FastAPI
from fastapi.testclient import TestClient

from gestao_milhas.api.error_handlers import register_error_handlers
from gestao_milhas.domain.errors import (
    InvalidPurchaseStateError,
    InvalidRequestError,
    PurchaseReleaseFailedError,
)


def test_domain_error_handler_returns_error_envelope() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise InvalidPurchaseStateError(message="Only OPEN purchases")

    client = TestClient(app)
    response = client.get("/boom")

    assert response.status_code == 400
    assert response.json() == {
        "ok": False,
        "error": "Only OPEN purchases",
        "code": "INVALID_PURCHASE_STATE",
    }


def test_release_failure_keeps_diagnostic_detail() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise PurchaseReleaseFailedError(details={"detail": "disk I/O error"})

    client = TestClient(app)
    response = client.get("/boom")

    body = response.json()
    assert response.status_code == 500
    assert body["ok"] is False
    assert body["code"] == "RELEASE_FAILED"
    assert body["details"] == {"detail": "disk I/O error"}


def test_unexpected_error_returns_generic_500() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise KeyError("missing")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")

    body = response.json()
    assert response.status_code == 500
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["details"] == {"error_type": "KeyError"}


def test_validation_error_is_reported_as_invalid_request() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/points")
    def points(amount: int) -> dict[str, int]:
        return {"amount": amount}

    client = TestClient(app)
    response = client.get("/points", params={"amount": "many"})

    body = response.json()
    assert response.status_code == InvalidRequestError().status_code == 400
    assert body["code"] == InvalidRequestError().code
    assert body["error"].startswith("Cause: Request validation failed.")
    assert body["details"]["errors"][0]["loc"] == ["query", "amount"]
