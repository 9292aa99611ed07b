"""CLI bootstrap for gestao-milhas."""

from uuid import UUID

import typer
from sqlalchemy.orm import Session, sessionmaker

from gestao_milhas.core.settings import get_settings
from gestao_milhas.db.models.user import User, UserRole
from gestao_milhas.domain.errors import DomainError
from gestao_milhas.domain.local_time import format_local
from gestao_milhas.domain.money import format_cents
from gestao_milhas.domain.programs import (
    MAX_POINTS,
    LoyaltyProgram,
    clamp_points,
    resolve_program,
)
from gestao_milhas.repositories.cedente_repository import CedenteRepository
from gestao_milhas.repositories.commission_repository import CommissionRepository
from gestao_milhas.repositories.purchase_repository import PurchaseRepository
from gestao_milhas.repositories.user_repository import UserRepository
from gestao_milhas.services.recompute_service import PurchaseRecomputeService
from gestao_milhas.services.release_service import PurchaseReleaseService

app = typer.Typer(help="Operator CLI for cedentes, purchases and commissions.")
OVERRIDE_OPTION = typer.Option(
    None,
    "--override",
    "-o",
    help="Applied balance override as PROGRAM=POINTS (e.g. LATAM=1000).",
)


def get_session_factory() -> sessionmaker[Session]:
    """Return the process-wide session factory."""

    from gestao_milhas.db.session import SessionFactory

    return SessionFactory


def parse_overrides(raw_overrides: list[str] | None) -> dict[LoyaltyProgram, int]:
    """Parse PROGRAM=POINTS pairs into normalized overrides."""

    overrides: dict[LoyaltyProgram, int] = {}
    for raw in raw_overrides or []:
        name, separator, value = raw.partition("=")
        program = resolve_program(name)
        if not separator or program is None:
            raise typer.BadParameter(
                f"Invalid override {raw!r}; expected PROGRAM=POINTS.",
                param_hint="--override",
            )
        points = clamp_points(value)
        if points > MAX_POINTS:
            raise typer.BadParameter(
                f"Override {raw!r} exceeds {MAX_POINTS} points.",
                param_hint="--override",
            )
        overrides[program] = points
    return overrides


def _build_release_service(session: Session) -> PurchaseReleaseService:
    purchase_repository = PurchaseRepository(session)
    return PurchaseReleaseService(
        purchase_repository=purchase_repository,
        cedente_repository=CedenteRepository(session),
        commission_repository=CommissionRepository(session),
        recompute_service=PurchaseRecomputeService(
            purchase_repository=purchase_repository,
            session=session,
        ),
        session=session,
    )


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("gestao-milhas is ready")


@app.command("create-user")
def create_user(
    login: str = typer.Option(...),
    name: str = typer.Option(...),
    role: UserRole = typer.Option(UserRole.STAFF),
    email: str | None = typer.Option(None),
    team: str = typer.Option(""),
) -> None:
    """Register a dashboard operator."""
    with get_session_factory()() as session:
        repository = UserRepository(session)
        normalized_login = login.strip().lower()
        if repository.get_by_login(normalized_login) is not None:
            typer.echo(f"Usuario {normalized_login} ja existe", err=True)
            raise typer.Exit(code=1)
        user = repository.add(
            User(
                login=normalized_login,
                name=name.strip(),
                email=email,
                team=team,
                role=role,
            )
        )
        session.commit()
        typer.echo(f"Usuario criado: {user.login} ({user.id})")


@app.command("recompute-purchase")
def recompute_purchase(purchase_id: UUID) -> None:
    """Recalculate predicted balances of an open purchase."""
    with get_session_factory()() as session:
        service = PurchaseRecomputeService(
            purchase_repository=PurchaseRepository(session),
            session=session,
        )
        purchase = service.recompute_purchase(purchase_id)
        if purchase is None:
            typer.echo(f"Compra {purchase_id} nao encontrada", err=True)
            raise typer.Exit(code=1)
        for program, value in purchase.predicted_balances().items():
            typer.echo(f"{program}: {value if value is not None else '-'}")


@app.command("release-purchase")
def release_purchase(
    purchase_id: UUID,
    user: str = typer.Option(..., "--user", "-u", help="Login of the operator."),
    override: list[str] | None = OVERRIDE_OPTION,
) -> None:
    """Release an open purchase and print the applied balances."""
    overrides = parse_overrides(override)
    with get_session_factory()() as session:
        operator = UserRepository(session).get_by_login(user)
        if operator is None:
            typer.echo(f"Usuario {user} nao encontrado", err=True)
            raise typer.Exit(code=1)

        try:
            result = _build_release_service(session).release_purchase(
                purchase_id, operator.id, overrides
            )
        except DomainError as exc:
            typer.echo(f"Erro [{exc.code}]: {exc.message}", err=True)
            raise typer.Exit(code=2) from exc

        purchase = result.purchase
        typer.echo(f"Compra {purchase.id} liberada")
        if purchase.released_at is not None:
            released_at = format_local(
                purchase.released_at, get_settings().app_timezone
            )
            typer.echo(f"Liberada em: {released_at}")
        if purchase.cedente is not None:
            for program, value in purchase.cedente.balances().items():
                typer.echo(f"{program}: {value}")
        if result.commission is not None:
            typer.echo(f"Comissao: {format_cents(result.commission.amount_cents)}")
        else:
            typer.echo("Comissao: -")


def main() -> None:
    """Run the gestao-milhas CLI application."""
    app()


if __name__ == "__main__":
    main()
