from __future__ import annotations

import pytest
from conftest import seed_learner
from sqlalchemy.orm import Session, sessionmaker
from typer.testing import CliRunner

from mykahfi_portal import cli
from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.domain.passwords import verify_password

runner = CliRunner()


@pytest.fixture
def cli_session_factory(
    sqlite_session_factory: sessionmaker[Session],
    monkeypatch: pytest.MonkeyPatch,
) -> sessionmaker[Session]:
    monkeypatch.setattr(cli, "SessionFactory", sqlite_session_factory)
    return sqlite_session_factory


def test_healthcheck_command() -> None:
    result = runner.invoke(cli.app, ["healthcheck"])

    assert result.exit_code == 0
    assert "mykahfi-portal is ready" in result.output


def test_migrate_passwords_hashes_plaintext_accounts(
    cli_session_factory: sessionmaker[Session],
) -> None:
    with cli_session_factory() as session:
        seed_learner(session, nis="000001", password="plain-one")
        seed_learner(session, nis="000002")

    result = runner.invoke(cli.app, ["migrate-passwords", "--batch-size", "1"])

    assert result.exit_code == 0, result.output
    assert "- scanned: 2" in result.output
    assert "- already_hashed: 1" in result.output
    assert "- migrated_or_would_migrate: 1" in result.output
    with cli_session_factory() as session:
        learner = session.get(Learner, "000001")
        assert learner is not None
        assert learner.password.startswith("$2")
        assert verify_password("plain-one", learner.password)


def test_migrate_passwords_dry_run_leaves_rows_untouched(
    cli_session_factory: sessionmaker[Session],
) -> None:
    with cli_session_factory() as session:
        seed_learner(session, nis="000001", password="plain-one")

    result = runner.invoke(cli.app, ["migrate-passwords", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "dryRun=True" in result.output
    with cli_session_factory() as session:
        learner = session.get(Learner, "000001")
        assert learner is not None
        assert learner.password == "plain-one"
