"""Tests for the ``flask seed`` command group."""

from __future__ import annotations

from catetin.repositories import AuthProviderRepository, UserRepository


def test_seed_providers_is_idempotent(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "providers"])
    second = runner.invoke(args=["seed", "providers"])

    assert first.exit_code == 0, first.output
    assert "created= 1" in first.output
    assert "existing= 1" in second.output
    assert AuthProviderRepository().find_by_name("email-password") is not None


def test_seed_run_creates_demo_accounts_once(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    second = runner.invoke(args=["seed", "run"])

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "users" in first.output
    assert UserRepository().find_by_phone_number("budi.santoso@example.com").full_name == "Budi Santoso"


def test_seed_run_refuses_production(app):
    app.config["APP_ENV"] = "production"
    app.config["TESTING"] = False
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed", "run"])

    assert result.exit_code != 0
    assert "non-production" in result.output
