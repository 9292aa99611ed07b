from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from gestao_milhas.api.session import SessionUser, encode_session_cookie
from gestao_milhas.db.models.cedente import Cedente
from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.services.recompute_service import PurchaseRecomputeService

if TYPE_CHECKING:
    from conftest import Seeder


def release_url(purchase_id: UUID | str) -> str:
    return f"/v1/compras/{purchase_id}/liberar"


def test_release_returns_closed_purchase_and_commission(
    client: TestClient,
    seed: Seeder,
    operator_id: UUID,
    session_cookies: dict[str, str],
) -> None:
    cedente_id = seed.cedente(points_latam=100)
    purchase_id = seed.purchase(
        cedente_id,
        items=[{"title": "Compra LATAM", "program_to": "LATAM", "points_final": 20}],
        cedente_pay_cents=5000,
    )
    client.cookies.update(session_cookies)

    response = client.post(release_url(purchase_id))

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    compra = body["data"]["compra"]
    assert compra["id"] == str(purchase_id)
    assert compra["status"] == "CLOSED"
    assert compra["released_by"]["id"] == str(operator_id)
    assert compra["released_at"] is not None
    assert compra["applied_balances"]["LATAM"] == 120
    assert compra["cedente"]["points"]["LATAM"] == 120
    assert [item["status"] for item in compra["items"]] == ["RELEASED"]
    commission = body["data"]["commission"]
    assert commission["amount_cents"] == 5000
    assert commission["amount"] == "50.00"
    assert commission["status"] == "PENDING"
    assert commission["generated_by_id"] == str(operator_id)


def test_release_without_pay_returns_null_commission(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
) -> None:
    purchase_id = seed.purchase(seed.cedente())
    client.cookies.update(session_cookies)

    response = client.post(release_url(purchase_id))

    assert response.status_code == 200
    assert response.json()["data"]["commission"] is None


def test_release_applies_operator_balances(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    cedente_id = seed.cedente(points_latam=100, points_tap=5)
    purchase_id = seed.purchase(
        cedente_id,
        items=[{"program_to": "LATAM", "points_final": 20}],
    )
    client.cookies.update(session_cookies)

    response = client.post(
        release_url(purchase_id),
        json={"saldosAplicados": {"latam": 999, "flyingBlue": 12.7, "tap": -3}},
    )

    assert response.status_code == 200
    with sqlite_session_factory() as session:
        cedente = session.get(Cedente, cedente_id)
        assert cedente is not None
        assert cedente.points_latam == 999
        assert cedente.points_flying_blue == 12
        assert cedente.points_tap == 0


def test_release_without_session_returns_400(
    client: TestClient,
    seed: Seeder,
) -> None:
    purchase_id = seed.purchase(seed.cedente())

    response = client.post(release_url(purchase_id))

    assert response.status_code == 400
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == "INVALID_SESSION"


def test_release_with_garbage_cookie_returns_400(
    client: TestClient,
    seed: Seeder,
) -> None:
    purchase_id = seed.purchase(seed.cedente())
    client.cookies.set("tm.session", "not-a-session")

    response = client.post(release_url(purchase_id))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SESSION"


def test_release_with_unknown_session_user_returns_400(
    client: TestClient,
    seed: Seeder,
) -> None:
    purchase_id = seed.purchase(seed.cedente())
    ghost = SessionUser(id=uuid4(), login="ghost", role="admin", team="@milhas")
    client.cookies.set("tm.session", encode_session_cookie(ghost))

    response = client.post(release_url(purchase_id))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SESSION"


def test_release_unknown_purchase_returns_404(
    client: TestClient,
    session_cookies: dict[str, str],
) -> None:
    client.cookies.update(session_cookies)

    response = client.post(release_url(uuid4()))

    assert response.status_code == 404
    body = response.json()
    assert set(body) == {"ok", "error", "code", "details"}
    assert body["ok"] is False
    assert body["code"] == "PURCHASE_NOT_FOUND"
    assert body["error"].startswith("Cause: ")


def test_release_closed_purchase_returns_400(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
) -> None:
    purchase_id = seed.purchase(seed.cedente(), status=PurchaseStatus.CLOSED)
    client.cookies.update(session_cookies)

    response = client.post(release_url(purchase_id))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PURCHASE_STATE"


def test_double_release_returns_400_on_second_call(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    cedente_id = seed.cedente(points_smiles=10)
    purchase_id = seed.purchase(
        cedente_id,
        items=[{"program_to": "SMILES", "points_final": 90}],
    )
    client.cookies.update(session_cookies)

    first = client.post(release_url(purchase_id))
    second = client.post(release_url(purchase_id))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["code"] == "INVALID_PURCHASE_STATE"
    with sqlite_session_factory() as session:
        cedente = session.get(Cedente, cedente_id)
        assert cedente is not None
        assert cedente.points_smiles == 100


def test_release_with_malformed_body_returns_400(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
) -> None:
    purchase_id = seed.purchase(seed.cedente())
    client.cookies.update(session_cookies)

    response = client.post(
        release_url(purchase_id),
        json={"saldosAplicados": {"latam": "muitos"}},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == "INVALID_REQUEST"
    assert body["details"]["errors"]


def test_release_with_invalid_id_returns_400(
    client: TestClient,
    session_cookies: dict[str, str],
) -> None:
    client.cookies.update(session_cookies)

    response = client.post(release_url("not-a-uuid"))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_openapi_documents_release_responses(client: TestClient) -> None:
    response = client.get("/openapi.json")

    operation = response.json()["paths"]["/v1/compras/{purchase_id}/liberar"]["post"]
    assert {"200", "400", "404", "500"} <= set(operation["responses"])


def test_recompute_failure_returns_release_failed(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    purchase_id = seed.purchase(seed.cedente())

    def explode(self: PurchaseRecomputeService, purchase_id: UUID) -> None:
        raise RuntimeError("recompute exploded")

    monkeypatch.setattr(PurchaseRecomputeService, "recompute_purchase", explode)
    client.cookies.update(session_cookies)

    response = client.post(release_url(purchase_id))

    assert response.status_code == 500
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == "RELEASE_FAILED"
    assert body["details"] == {"detail": "recompute exploded"}


def test_release_rejects_balance_beyond_column_range(
    client: TestClient,
    seed: Seeder,
    session_cookies: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    cedente_id = seed.cedente(points_latam=100)
    purchase_id = seed.purchase(cedente_id)
    client.cookies.update(session_cookies)

    response = client.post(
        release_url(purchase_id),
        json={"saldosAplicados": {"latam": 2**31}},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
    with sqlite_session_factory() as session:
        purchase = session.get(Purchase, purchase_id)
        cedente = session.get(Cedente, cedente_id)
        assert purchase is not None
        assert cedente is not None
        assert purchase.status == PurchaseStatus.OPEN
        assert cedente.points_latam == 100
