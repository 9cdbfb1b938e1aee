import pytest

from easytrip.core.db import mask_dsn, resolve_database_url


def test_plain_postgresql_scheme_uses_psycopg(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://trip:secret@db:5432/easytrip")
    assert resolve_database_url() == "postgresql+psycopg://trip:secret@db:5432/easytrip"


@pytest.mark.parametrize("url", ["sqlite:///easytrip.db", "mysql://u:p@h/db", "not a url"])
def test_non_postgres_url_is_refused(monkeypatch, url):
    monkeypatch.setenv("DATABASE_URL", url)
    with pytest.raises(RuntimeError):
        resolve_database_url()


def test_mask_dsn_hides_password():
    masked = mask_dsn("postgresql+psycopg://trip:secret@db:5432/easytrip")
    assert "secret" not in masked
    assert masked.startswith("postgresql+psycopg://trip:***@db:5432")
