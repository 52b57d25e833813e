import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from farmcart.config import Settings, load_settings

KEYS = ("FARMCART_DATA_DIR", "FARMCART_CATALOG", "FARMCART_CURRENCY", "FARMCART_LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch):
    # setenv + delenv: переменные, выставленные load_dotenv, будут убраны после теста
    for key in KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings == Settings(
        data_dir="data",
        catalog_path=os.path.join("data", "seed.json"),
        currency="INR",
        log_level="INFO",
    )


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("FARMCART_DATA_DIR", str(tmp_path))
    clean_env.setenv("FARMCART_CURRENCY", "usd")

    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings.data_dir == str(tmp_path)
    assert settings.catalog_path == os.path.join(str(tmp_path), "seed.json")
    assert settings.currency == "USD"


def test_dotenv_file_is_read(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FARMCART_LOG_LEVEL=debug\nFARMCART_CATALOG=/srv/catalog.json\n")

    settings = load_settings(str(env_file))
    assert settings.log_level == "DEBUG"
    assert settings.catalog_path == "/srv/catalog.json"


def test_env_file_is_optional(clean_env):
    # без пути python-dotenv ищет .env сам; отсутствие файла - не ошибка
    settings = load_settings(None)
    assert isinstance(settings, Settings)
    assert settings.currency
