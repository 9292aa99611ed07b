"""SQLAlchemy base metadata and model registration utilities."""

from importlib import import_module

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


def import_orm_models() -> None:
    """Import ORM models so metadata is fully populated."""

    modules = (
        "gestao_milhas.db.models.user",
        "gestao_milhas.db.models.cedente",
        "gestao_milhas.db.models.purchase",
        "gestao_milhas.db.models.purchase_item",
        "gestao_milhas.db.models.cedente_commission",
    )
    for module_name in modules:
        import_module(module_name)
