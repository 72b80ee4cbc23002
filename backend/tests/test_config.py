import pytest

from juslearn.config import Settings


def test_defaults(monkeypatch):
    for name in ("ENV", "JUSLEARN_RESET_ON_STARTUP", "JUSLEARN_ENFORCE_FOREIGN_KEYS", "JUSLEARN_PASSWORD_ROUNDS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.ENV == "dev"
    assert s.RESET_ON_STARTUP is True
    assert s.ENFORCE_FOREIGN_KEYS is False
    assert s.PASSWORD_ROUNDS == 29000
    assert s.DATABASE_URL.startswith("sqlite:///")


def test_reset_outside_dev_requires_opt_in(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("JUSLEARN_RESET_ON_STARTUP", "true")
    monkeypatch.delenv("JUSLEARN_ALLOW_RESET_OUTSIDE_DEV", raising=False)
    with pytest.raises(RuntimeError):
        Settings()
    monkeypatch.setenv("JUSLEARN_ALLOW_RESET_OUTSIDE_DEV", "true")
    assert Settings().RESET_ON_STARTUP is True


def test_prod_without_reset_is_valid(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("JUSLEARN_RESET_ON_STARTUP", "false")
    assert Settings().RESET_ON_STARTUP is False


def test_password_rounds_lower_bound(monkeypatch):
    monkeypatch.setenv("JUSLEARN_PASSWORD_ROUNDS", "5")
    with pytest.raises(RuntimeError):
        Settings()
