"""
Configuration loading utilities for chainview.

Network endpoints come from config/explorer.yaml; secrets and overrides
come from the environment (.env is loaded via python-dotenv):
- ALCHEMY_API_KEY: provider key substituted into endpoint templates
- CHAINVIEW_NETWORK: network key to use instead of the YAML default
- LOG_LEVEL: logging level
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_MAX_NFT_PAGES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WINDOW_SIZE,
)

load_dotenv()

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_FILE = "explorer.yaml"


def load_yaml(filename: str, config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory
        config_dir: Directory holding the file

    Returns:
        Parsed YAML as dict
    """
    filepath = config_dir / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_network_config(networks: Dict[str, Any], network: Optional[str]) -> Dict[str, Any]:
    """
    Get configuration for a specific network.

    Args:
        networks: The networks section of explorer.yaml
        network: Network identifier (e.g., 'eth_mainnet')

    Returns:
        Network configuration dict
    """
    if network not in networks:
        raise KeyError(f"Unknown network: {network}")
    return networks[network]


@dataclass
class ExplorerConfig:
    """Resolved explorer configuration."""

    network: str
    rpc_urls: List[str]
    nft_api_urls: List[str]
    api_key: str = ""
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    window_size: int = DEFAULT_WINDOW_SIZE
    max_nft_pages: int = DEFAULT_MAX_NFT_PAGES
    log_level: str = "WARNING"


def load_explorer_config(
    config_path: Optional[Path] = None,
    network: Optional[str] = None,
) -> ExplorerConfig:
    """
    Load explorer configuration from YAML plus environment.

    Args:
        config_path: Path to explorer.yaml (default: config/explorer.yaml)
        network: Network key; falls back to CHAINVIEW_NETWORK, then the
            file's default_network

    Returns:
        ExplorerConfig for the selected network
    """
    if config_path is None:
        config_path = CONFIG_DIR / DEFAULT_CONFIG_FILE

    data = load_yaml(config_path.name, config_path.parent)
    defaults = data.get("defaults", {})
    networks = data.get("networks", {})

    network = network or os.getenv("CHAINVIEW_NETWORK") or data.get("default_network")
    net = get_network_config(networks, network)

    return ExplorerConfig(
        network=network,
        rpc_urls=list(net.get("rpc_endpoints", [])),
        nft_api_urls=list(net.get("nft_api_endpoints", [])),
        api_key=os.getenv("ALCHEMY_API_KEY", ""),
        timeout_seconds=int(defaults.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        window_size=int(defaults.get("window_size", DEFAULT_WINDOW_SIZE)),
        max_nft_pages=int(net.get("max_nft_pages", defaults.get("max_nft_pages", DEFAULT_MAX_NFT_PAGES))),
        log_level=os.getenv("LOG_LEVEL", defaults.get("log_level", "WARNING")).upper(),
    )
