import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_BASE_URL = "https://api.etherscan.io/v2/api"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_MAX_RETRIES = 5
DEFAULT_BACKOFF_SECONDS = 1.0

MAINNET_CHAIN_ID = 1
SEPOLIA_CHAIN_ID = 11155111

NETWORK_CHAIN_ID_MAP = {
    "mainnet": MAINNET_CHAIN_ID,
    "ethereum": MAINNET_CHAIN_ID,
    "eth": MAINNET_CHAIN_ID,
    "sepolia": SEPOLIA_CHAIN_ID,
}

NETWORK_LABELS = {
    MAINNET_CHAIN_ID: "Mainnet",
    SEPOLIA_CHAIN_ID: "Sepolia",
}


@dataclass
class Config:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    network: str = "mainnet"
    chain_id: int = MAINNET_CHAIN_ID
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS


class ClientSession:
    """
    Per-process connection settings. Only the chain selector may change after
    construction; callers must not switch it while a resolution is in flight.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        chain_id: int = MAINNET_CHAIN_ID,
    ) -> None:
        self._api_key = api_key or ""
        self._base_url = base_url.rstrip("/")
        self.chain_id = chain_id

    @classmethod
    def from_config(cls, config: Config) -> "ClientSession":
        return cls(api_key=config.api_key, base_url=config.base_url, chain_id=config.chain_id)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_chain_id(self, chain_id: int) -> None:
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
            raise ValueError("chain_id must be a positive integer.")
        self.chain_id = chain_id

    def toggle_network(self) -> int:
        """Flip between Mainnet and Sepolia. Any other chain goes back to Mainnet."""
        if self.chain_id == MAINNET_CHAIN_ID:
            self.chain_id = SEPOLIA_CHAIN_ID
        else:
            self.chain_id = MAINNET_CHAIN_ID
        return self.chain_id


def network_label(chain_id: int) -> str:
    return NETWORK_LABELS.get(chain_id, f"Chain {chain_id}")


def resolve_chain_id(network: str, override_chain_id: Optional[str] = None) -> int:
    """Resolve chain ID from override, numeric input or static network mapping."""
    if override_chain_id:
        candidate = override_chain_id.strip()
        if not candidate.isdigit():
            raise ValueError(f"CHAIN_ID must be numeric, got '{override_chain_id}'.")
        return int(candidate)

    normalized = (network or "").strip().lower()
    if normalized.isdigit():
        return int(normalized)

    if normalized in NETWORK_CHAIN_ID_MAP:
        return NETWORK_CHAIN_ID_MAP[normalized]

    allowed = ", ".join(sorted(NETWORK_CHAIN_ID_MAP.keys()) + ["<chain_id>"])
    raise ValueError(f"Unknown network '{network}'. Supported: {allowed}.")


def load_config() -> Config:
    """
    Load configuration from environment variables (and a local .env if present).
    A missing ETHERSCAN_API_KEY is reported by the client on first use.
    """
    load_dotenv(find_dotenv(usecwd=True))

    api_key = os.getenv("ETHERSCAN_API_KEY", "").strip()
    base_url = os.getenv("ETHERSCAN_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
    network = os.getenv("NETWORK", "mainnet").strip().lower()
    chain_id_env = os.getenv("CHAIN_ID")
    timeout = float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT)))
    max_retries = int(os.getenv("REQUEST_RETRIES", str(DEFAULT_MAX_RETRIES)))
    backoff = float(os.getenv("REQUEST_BACKOFF_SECONDS", str(DEFAULT_BACKOFF_SECONDS)))

    chain_id = resolve_chain_id(network, chain_id_env)

    return Config(
        api_key=api_key,
        base_url=base_url,
        network=network,
        chain_id=chain_id,
        request_timeout=timeout,
        max_retries=max_retries,
        backoff_seconds=backoff,
    )
