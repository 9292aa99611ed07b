from __future__ import annotations

from collections.abc import Generator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gestao_milhas.api.app import create_app
from gestao_milhas.api.session import SessionUser, encode_session_cookie
from gestao_milhas.db.base import Base, import_orm_models
from gestao_milhas.db.models.cedente import Cedente
from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.db.models.purchase_item import PurchaseItem, PurchaseItemStatus
from gestao_milhas.db.models.user import User, UserRole
from gestao_milhas.db.session import get_db_session


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    with TestClient(app) as test_client:
        yield test_client


class Seeder:
    """Persists operators, cedentes and purchases for tests."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._document_counter = 0

    def user(self, login: str = "rafael", role: UserRole = UserRole.ADMIN) -> UUID:
        with self._session_factory() as session:
            user = User(login=login, name=login.title(), team="@milhas", role=role)
            session.add(user)
            session.commit()
            return user.id

    def cedente(self, **points: int) -> UUID:
        self._document_counter += 1
        with self._session_factory() as session:
            cedente = Cedente(
                full_name=f"Cedente {self._document_counter}",
                document_id=f"{self._document_counter:011d}",
                **points,
            )
            session.add(cedente)
            session.commit()
            return cedente.id

    def purchase(
        self,
        cedente_id: UUID | None,
        *,
        items: list[dict[str, object]] | None = None,
        cedente_pay_cents: int = 0,
        status: PurchaseStatus = PurchaseStatus.OPEN,
        **predicted: int | None,
    ) -> UUID:
        with self._session_factory() as session:
            purchase = Purchase(
                cedente_id=cedente_id,
                status=status,
                cedente_pay_cents=cedente_pay_cents,
                **predicted,
            )
            for item in items or []:
                purchase.items.append(
                    PurchaseItem(
                        title=item.get("title"),
                        program_from=item.get("program_from"),
                        program_to=item.get("program_to"),
                        points_final=item.get("points_final", 0),
                        points_debited_from_origin=item.get(
                            "points_debited_from_origin", 0
                        ),
                        status=item.get("status", PurchaseItemStatus.PENDING),
                    )
                )
            session.add(purchase)
            session.commit()
            return purchase.id


@pytest.fixture
def seed(sqlite_session_factory: sessionmaker[Session]) -> Seeder:
    return Seeder(sqlite_session_factory)


@pytest.fixture
def operator_id(seed: Seeder) -> UUID:
    return seed.user()


@pytest.fixture
def session_cookies(operator_id: UUID) -> dict[str, str]:
    cookie = encode_session_cookie(
        SessionUser(id=operator_id, login="rafael", role="admin", team="@milhas")
    )
    return {"tm.session": cookie}
