"""CLI bootstrap for mykahfi-portal."""

import typer

from mykahfi_portal.db.session import SessionFactory
from mykahfi_portal.repositories.learner_repository import LearnerRepository
from mykahfi_portal.services.password_migration_service import (
    DEFAULT_BATCH_SIZE,
    PasswordMigrationService,
)

app = typer.Typer(help="Operational commands for the MyKahfi parent portal.")


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("mykahfi-portal is ready")


@app.command("migrate-passwords")
def migrate_passwords(
    dry_run: bool = typer.Option(False, "--dry-run", help="Count without writing."),
    batch_size: int = typer.Option(DEFAULT_BATCH_SIZE, "--batch-size", min=1),
    limit: int | None = typer.Option(None, "--limit", min=1),
) -> None:
    """Hash every legacy plaintext password with bcrypt."""
    typer.echo(
        "[password-migration] Start "
        f"dryRun={dry_run} batchSize={batch_size} limit={limit or 'all'}"
    )
    with SessionFactory() as session:
        summary = PasswordMigrationService(
            credential_repository=LearnerRepository(session),
            session=session,
        ).migrate(dry_run=dry_run, batch_size=batch_size, limit=limit)

    typer.echo("[password-migration] Summary")
    typer.echo(f"- scanned: {summary.scanned}")
    typer.echo(f"- already_hashed: {summary.already_hashed}")
    typer.echo(f"- plaintext_candidates: {summary.plaintext_candidates}")
    typer.echo(f"- migrated_or_would_migrate: {summary.migrated}")
    typer.echo(f"- failures: {summary.failures}")

    if summary.failures > 0:
        raise typer.Exit(code=1)


def main() -> None:
    """Run the mykahfi-portal CLI application."""
    app()


if __name__ == "__main__":
    main()
