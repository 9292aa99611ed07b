from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from fastapi.testclient import TestClient

if TYPE_CHECKING:
    from conftest import Seeder


def test_get_cedente_returns_every_program_balance(
    client: TestClient,
    seed: Seeder,
) -> None:
    cedente_id = seed.cedente(points_azul=1_500, points_flying_blue=20)

    response = client.get(f"/v1/cedentes/{cedente_id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == str(cedente_id)
    assert data["points"] == {
        "LATAM": 0,
        "SMILES": 0,
        "LIVELO": 0,
        "ESFERA": 0,
        "AZUL": 1_500,
        "IBERIA": 0,
        "AA": 0,
        "TAP": 0,
        "FLYING_BLUE": 20,
    }


def test_get_unknown_cedente_returns_404(client: TestClient) -> None:
    response = client.get(f"/v1/cedentes/{uuid4()}")

    assert response.status_code == 404
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == "CEDENTE_NOT_FOUND"


def test_get_cedente_with_invalid_id_returns_400(client: TestClient) -> None:
    response = client.get("/v1/cedentes/123")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
