import pytest

from app.config import (
    DEFAULT_BASE_URL,
    ClientSession,
    load_config,
    network_label,
    resolve_chain_id,
)

ENV_KEYS = [
    "ETHERSCAN_API_KEY",
    "ETHERSCAN_BASE_URL",
    "NETWORK",
    "CHAIN_ID",
    "REQUEST_TIMEOUT",
    "REQUEST_RETRIES",
    "REQUEST_BACKOFF_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "abc")
    cfg = load_config()
    assert cfg.api_key == "abc"
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.chain_id == 1
    assert cfg.request_timeout == 15.0
    assert cfg.max_retries == 5


def test_missing_api_key_is_deferred():
    assert load_config().api_key == ""


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("NETWORK", "Sepolia")
    monkeypatch.setenv("ETHERSCAN_BASE_URL", "http://localhost:9000/api/")
    monkeypatch.setenv("REQUEST_RETRIES", "2")
    cfg = load_config()
    assert cfg.chain_id == 11155111
    assert cfg.base_url == "http://localhost:9000/api"
    assert cfg.max_retries == 2


def test_chain_id_override(monkeypatch):
    monkeypatch.setenv("NETWORK", "mainnet")
    monkeypatch.setenv("CHAIN_ID", "17000")
    assert load_config().chain_id == 17000


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    # register the key with monkeypatch so the value load_dotenv sets is undone
    monkeypatch.setenv("ETHERSCAN_API_KEY", "placeholder")
    monkeypatch.delenv("ETHERSCAN_API_KEY")
    (tmp_path / ".env").write_text("ETHERSCAN_API_KEY=from-dotenv\n")
    assert load_config().api_key == "from-dotenv"


@pytest.mark.parametrize(
    "network, expected",
    [("mainnet", 1), ("ETH", 1), ("sepolia", 11155111), ("137", 137)],
)
def test_resolve_chain_id(network, expected):
    assert resolve_chain_id(network) == expected


def test_resolve_chain_id_unknown():
    with pytest.raises(ValueError, match="Unknown network"):
        resolve_chain_id("holesky")


def test_resolve_chain_id_bad_override():
    with pytest.raises(ValueError, match="CHAIN_ID"):
        resolve_chain_id("mainnet", "abc")


def test_session_toggle():
    session = ClientSession(api_key="k")
    assert session.toggle_network() == 11155111
    assert session.toggle_network() == 1
    session.set_chain_id(137)
    assert session.toggle_network() == 1


@pytest.mark.parametrize("value", [0, -1, True, "1"])
def test_session_rejects_bad_chain_id(value):
    with pytest.raises(ValueError):
        ClientSession(api_key="k").set_chain_id(value)


def test_network_label():
    assert network_label(1) == "Mainnet"
    assert network_label(11155111) == "Sepolia"
    assert network_label(10) == "Chain 10"
