import pytest

from marketplace_stats.config import get_config, reset_config, set_config_for_test

ENV_VARS = [
    "LOG_LEVEL", "DATA_DIR", "ORDER_SNAPSHOT_LIMIT", "LEADERBOARD_SIZE",
    "STRICT_NUMBERS", "UNKNOWN_STORE_NAME", "CURRENCY_SUFFIX",
]


@pytest.fixture(autouse=True)
def clear_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


def test_defaults():
    config = get_config()
    assert config.order_snapshot_limit == 1000
    assert config.leaderboard_size == 10
    assert config.strict_numbers is False
    assert config.unknown_store_name == "Noma'lum do'kon"
    assert config.unknown_product_name == "Noma'lum mahsulot"
    assert config.currency_suffix == "so'm"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LEADERBOARD_SIZE", "5")
    monkeypatch.setenv("STRICT_NUMBERS", "true")
    monkeypatch.setenv("DATA_DIR", "/srv/snapshots")
    config = get_config()
    assert config.leaderboard_size == 5
    assert config.strict_numbers is True
    assert config.data_dir == "/srv/snapshots"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("ORDER_SNAPSHOT_LIMIT=250\n", encoding="utf-8")
    assert get_config().order_snapshot_limit == 250


def test_singleton_and_test_override():
    assert get_config() is get_config()
    set_config_for_test(currency_suffix="UZS")
    assert get_config().currency_suffix == "UZS"
