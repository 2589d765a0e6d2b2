import importlib
import sys
import pytest


def _reload_config():
    import brewhub.config as config
    return importlib.reload(config)


def test_default_is_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    config = _reload_config()
    assert config.get_config_class() is config.DevelopmentConfig


def test_testing_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    config = _reload_config()
    cls = config.get_config_class()
    assert cls is config.TestingConfig
    assert cls.RATELIMIT_ENABLED is False
    assert cls.AUTH_JWT_AUDIENCE == "authenticated"


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    for name in ("SECRET_KEY", "DATABASE_URL", "AUTH_JWT_SECRET"):
        monkeypatch.delenv(name, raising=False)
    config = _reload_config()
    with pytest.raises(RuntimeError) as exc:
        config.get_config_class()
    assert "AUTH_JWT_SECRET" in str(exc.value)


def test_production_with_secrets(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "s")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("AUTH_JWT_SECRET", "j")
    config = _reload_config()
    assert config.get_config_class() is config.ProductionConfig


def test_max_quantity_from_env(monkeypatch):
    monkeypatch.setenv("MAX_QUANTITY_PER_ITEM", "12")
    config = _reload_config()
    assert config.BaseConfig.MAX_QUANTITY_PER_ITEM == 12


def test_main_exposes_app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    _reload_config()
    sys.modules.pop("main", None)
    main = importlib.import_module("main")
    assert main.app.config["TESTING"] is True
    sys.modules.pop("main", None)


@pytest.fixture(autouse=True)
def _restore_config():
    yield
    _reload_config()
