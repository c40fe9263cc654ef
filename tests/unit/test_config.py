# PATH: tests/unit/test_config.py
"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest

from config import (
    CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    ExplorerConfig,
    get_network_config,
    load_explorer_config,
    load_yaml,
)
from core.constants import DEFAULT_MAX_NFT_PAGES, DEFAULT_WINDOW_SIZE

CUSTOM_YAML = """
default_network: testnet

defaults:
  window_size: 5
  timeout_seconds: 3
  log_level: debug

networks:
  testnet:
    chain_id: 999
    rpc_endpoints:
      - https://rpc.one.test
      - https://rpc.two.test/${ALCHEMY_API_KEY}
    nft_api_endpoints:
      - https://nft.test/${ALCHEMY_API_KEY}
    max_nft_pages: 4
  other:
    rpc_endpoints:
      - https://other.test
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ALCHEMY_API_KEY", "CHAINVIEW_NETWORK", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def custom_config(tmp_path) -> Path:
    path = tmp_path / "explorer.yaml"
    path.write_text(CUSTOM_YAML, encoding="utf-8")
    return path


class TestBundledConfig:
    """The shipped explorer.yaml."""

    def test_config_file_exists(self):
        assert (CONFIG_DIR / DEFAULT_CONFIG_FILE).exists()

    def test_networks(self):
        networks = load_yaml(DEFAULT_CONFIG_FILE)["networks"]

        assert "eth_mainnet" in networks
        assert get_network_config(networks, "eth_mainnet")["chain_id"] == 1

    def test_unknown_network(self):
        networks = load_yaml(DEFAULT_CONFIG_FILE)["networks"]

        with pytest.raises(KeyError):
            get_network_config(networks, "no_such_chain")

    def test_defaults(self):
        config = load_explorer_config()

        assert config.network == "eth_mainnet"
        assert config.window_size == DEFAULT_WINDOW_SIZE
        assert config.max_nft_pages == DEFAULT_MAX_NFT_PAGES
        assert config.log_level == "WARNING"
        assert all("${ALCHEMY_API_KEY}" in url for url in config.rpc_urls)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml("absent.yaml", tmp_path)


class TestLoadExplorerConfig:
    """YAML plus environment overrides."""

    def test_file_values(self, custom_config):
        config = load_explorer_config(custom_config)

        assert isinstance(config, ExplorerConfig)
        assert config.network == "testnet"
        assert config.rpc_urls == ["https://rpc.one.test", "https://rpc.two.test/${ALCHEMY_API_KEY}"]
        assert config.window_size == 5
        assert config.timeout_seconds == 3
        assert config.max_nft_pages == 4
        assert config.log_level == "DEBUG"
        assert config.api_key == ""

    def test_network_argument(self, custom_config):
        config = load_explorer_config(custom_config, network="other")

        assert config.network == "other"
        assert config.nft_api_urls == []
        assert config.max_nft_pages == DEFAULT_MAX_NFT_PAGES

    def test_network_from_environment(self, custom_config, monkeypatch):
        monkeypatch.setenv("CHAINVIEW_NETWORK", "other")

        assert load_explorer_config(custom_config).network == "other"

    def test_argument_beats_environment(self, custom_config, monkeypatch):
        monkeypatch.setenv("CHAINVIEW_NETWORK", "other")

        assert load_explorer_config(custom_config, network="testnet").network == "testnet"

    def test_unknown_network(self, custom_config):
        with pytest.raises(KeyError):
            load_explorer_config(custom_config, network="mainnet")

    def test_api_key_and_log_level_from_environment(self, custom_config, monkeypatch):
        monkeypatch.setenv("ALCHEMY_API_KEY", "secret")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        config = load_explorer_config(custom_config)

        assert config.api_key == "secret"
        assert config.log_level == "WARNING"
