"""Tests for environment-driven settings."""
from __future__ import annotations

from outreach.core.config import Settings


def test_comma_separated_origins(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.example, http://b.example")

    settings = Settings()

    assert settings.allowed_origins == ["http://a.example", "http://b.example"]


def test_quoted_database_url_is_unwrapped(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", '"postgresql+psycopg://app@db/outreach"')

    assert Settings().database_url == "postgresql+psycopg://app@db/outreach"
