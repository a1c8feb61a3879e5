"""Tests for configuration helpers."""

from autoreconcile.config import Settings, parse_comma_list


def test_parse_comma_list_defaults() -> None:
    assert parse_comma_list(None, ["a"]) == ["a"]


def test_parse_comma_list_accepts_list() -> None:
    assert parse_comma_list(["x", "y"], ["a"]) == ["x", "y"]


def test_parse_comma_list_splits_string() -> None:
    assert parse_comma_list("x, y, ,z", ["a"]) == ["x", "y", "z"]


def test_fallback_models_from_env(monkeypatch) -> None:
    monkeypatch.setenv("FALLBACK_MODELS", "model-a, model-b")

    assert Settings(_env_file=None).fallback_models == ["model-a", "model-b"]


def test_environment_alias(monkeypatch) -> None:
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.setenv("ENV", "production")

    assert Settings(_env_file=None).environment == "production"


def test_defaults(monkeypatch) -> None:
    for name in ("OPENROUTER_API_KEY", "EXTRACTION_CONCURRENCY", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.openrouter_api_key == ""
    assert config.extraction_concurrency == 4
    assert "http://localhost:3000" in config.cors_origins
