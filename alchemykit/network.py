"""
Supported Alchemy networks.

Each network is identified by its URL slug (``eth-mainnet``) and maps to a
chain id, a native currency and the node / NFT base URLs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from alchemykit.utils.exceptions import NetworkNotFoundError

ALCHEMY_DOMAIN = "g.alchemy.com"


@dataclass(frozen=True)
class Network:
    """Alchemy network configuration"""
    slug: str
    chain_id: int
    name: str
    native_currency: str = "ETH"
    is_testnet: bool = False
    family: str = ""
    is_l2: bool = False

    @property
    def is_mainnet(self) -> bool:
        return not self.is_testnet

    @property
    def is_ethereum(self) -> bool:
        return self.family == "eth"

    @property
    def base_url(self) -> str:
        return f"https://{self.slug}.{ALCHEMY_DOMAIN}/v2"

    @property
    def nft_base_url(self) -> str:
        return f"https://{self.slug}.{ALCHEMY_DOMAIN}/nft/v3"

    def node_url(self, api_key: str) -> str:
        return f"{self.base_url}/{api_key}"

    def nft_url(self, api_key: str) -> str:
        return f"{self.nft_base_url}/{api_key}"

    def __str__(self) -> str:
        return self.slug


# slug, chain_id, display name, native currency, testnet, family, layer 2
_NETWORK_TABLE = [
    ("eth-mainnet", 1, "Ethereum", "ETH", False, "eth", False),
    ("eth-sepolia", 11155111, "Ethereum Sepolia", "ETH", True, "eth", False),
    ("eth-holesky", 17000, "Ethereum Holesky", "ETH", True, "eth", False),
    ("eth-hoodi", 560048, "Ethereum Hoodi", "ETH", True, "eth", False),
    ("polygon-mainnet", 137, "Polygon", "MATIC", False, "polygon", False),
    ("polygon-amoy", 80002, "Polygon Amoy", "MATIC", True, "polygon", False),
    ("arb-mainnet", 42161, "Arbitrum One", "ETH", False, "arbitrum", True),
    ("arb-sepolia", 421614, "Arbitrum Sepolia", "ETH", True, "arbitrum", True),
    ("arbnova-mainnet", 42170, "Arbitrum Nova", "ETH", False, "arbitrum", True),
    ("opt-mainnet", 10, "Optimism", "ETH", False, "optimism", True),
    ("opt-sepolia", 11155420, "Optimism Sepolia", "ETH", True, "optimism", True),
    ("base-mainnet", 8453, "Base", "ETH", False, "base", True),
    ("base-sepolia", 84532, "Base Sepolia", "ETH", True, "base", True),
    ("zksync-mainnet", 324, "zkSync Era", "ETH", False, "zksync", True),
    ("zksync-sepolia", 300, "zkSync Sepolia", "ETH", True, "zksync", True),
    ("polygonzkevm-mainnet", 1101, "Polygon zkEVM", "ETH", False, "polygonzkevm", True),
    ("polygonzkevm-cardona", 2442, "Polygon zkEVM Cardona", "ETH", True, "polygonzkevm", True),
    ("linea-mainnet", 59144, "Linea", "ETH", False, "linea", True),
    ("linea-sepolia", 59141, "Linea Sepolia", "ETH", True, "linea", True),
    ("scroll-mainnet", 534352, "Scroll", "ETH", False, "scroll", True),
    ("scroll-sepolia", 534351, "Scroll Sepolia", "ETH", True, "scroll", True),
    ("blast-mainnet", 81457, "Blast", "ETH", False, "blast", True),
    ("blast-sepolia", 168587773, "Blast Sepolia", "ETH", True, "blast", True),
    ("avax-mainnet", 43114, "Avalanche C-Chain", "AVAX", False, "avax", False),
    ("avax-fuji", 43113, "Avalanche Fuji", "AVAX", True, "avax", False),
    ("bnb-mainnet", 56, "BNB Smart Chain", "BNB", False, "bnb", False),
    ("bnb-testnet", 97, "BNB Testnet", "BNB", True, "bnb", False),
    ("fantom-mainnet", 250, "Fantom Opera", "FTM", False, "fantom", False),
    ("fantom-testnet", 4002, "Fantom Testnet", "FTM", True, "fantom", False),
    ("gnosis-mainnet", 100, "Gnosis", "xDAI", False, "gnosis", False),
    ("gnosis-chiado", 10200, "Gnosis Chiado", "xDAI", True, "gnosis", False),
    ("celo-mainnet", 42220, "Celo", "CELO", False, "celo", False),
    ("celo-alfajores", 44787, "Celo Alfajores", "CELO", True, "celo", False),
    ("mantle-mainnet", 5000, "Mantle", "MNT", False, "mantle", True),
    ("mantle-sepolia", 5003, "Mantle Sepolia", "MNT", True, "mantle", True),
    ("worldchain-mainnet", 480, "World Chain", "ETH", False, "worldchain", False),
    ("worldchain-sepolia", 4801, "World Chain Sepolia", "ETH", True, "worldchain", False),
    ("zora-mainnet", 7777777, "Zora", "ETH", False, "zora", True),
    ("zora-sepolia", 999999999, "Zora Sepolia", "ETH", True, "zora", True),
    ("berachain-bartio", 80084, "Berachain bArtio", "BERA", True, "berachain", False),
    ("flow-mainnet", 747, "Flow EVM", "FLOW", False, "flow", False),
    ("flow-testnet", 545, "Flow EVM Testnet", "FLOW", True, "flow", False),
]

_ALIASES = {
    "ethereum": "eth-mainnet",
    "eth": "eth-mainnet",
    "mainnet": "eth-mainnet",
    "sepolia": "eth-sepolia",
    "holesky": "eth-holesky",
    "polygon": "polygon-mainnet",
    "matic": "polygon-mainnet",
    "arbitrum": "arb-mainnet",
    "arbitrum-one": "arb-mainnet",
    "optimism": "opt-mainnet",
    "base": "base-mainnet",
    "zksync": "zksync-mainnet",
    "linea": "linea-mainnet",
    "scroll": "scroll-mainnet",
    "blast": "blast-mainnet",
    "avalanche": "avax-mainnet",
    "bsc": "bnb-mainnet",
    "bnb": "bnb-mainnet",
    "fantom": "fantom-mainnet",
    "gnosis": "gnosis-mainnet",
    "celo": "celo-mainnet",
    "mantle": "mantle-mainnet",
    "worldchain": "worldchain-mainnet",
    "zora": "zora-mainnet",
    "flow": "flow-mainnet",
}


class SupportedNetworks:
    """Registry of supported Alchemy networks"""

    NETWORKS: Dict[str, Network] = {}
    BY_CHAIN_ID: Dict[int, Network] = {}

    @classmethod
    def _init_networks(cls) -> None:
        """Initialize network registry"""
        if cls.NETWORKS:
            return
        for slug, chain_id, name, currency, testnet, family, l2 in _NETWORK_TABLE:
            network = Network(
                slug=slug,
                chain_id=chain_id,
                name=name,
                native_currency=currency,
                is_testnet=testnet,
                family=family,
                is_l2=l2,
            )
            cls.NETWORKS[slug] = network
            cls.BY_CHAIN_ID[chain_id] = network

    @classmethod
    def normalize_network(cls, raw: str) -> Optional[str]:
        """Normalize a slug, alias, chain id or ``eip155:<id>`` string to a slug."""
        cls._init_networks()
        normalized = raw.strip().lower()
        if normalized in cls.NETWORKS:
            return normalized
        if normalized in _ALIASES:
            return _ALIASES[normalized]
        if normalized.startswith("eip155:"):
            normalized = normalized.split(":", 1)[1]
        if normalized.isdigit():
            network = cls.BY_CHAIN_ID.get(int(normalized))
            return network.slug if network else None
        return None

    @classmethod
    def get_network(cls, raw: str | Network) -> Optional[Network]:
        """Get network by slug, alias or chain id"""
        if isinstance(raw, Network):
            return raw
        slug = cls.normalize_network(raw)
        if slug is None:
            return None
        return cls.NETWORKS[slug]

    @classmethod
    def require_network(cls, raw: str | Network) -> Network:
        network = cls.get_network(raw)
        if network is None:
            raise NetworkNotFoundError(str(raw))
        return network

    @classmethod
    def all_networks(cls) -> List[Network]:
        cls._init_networks()
        return list(cls.NETWORKS.values())

    @classmethod
    def mainnet_networks(cls) -> List[Network]:
        return [n for n in cls.all_networks() if n.is_mainnet]


def get_network(raw: str | Network) -> Network:
    return SupportedNetworks.require_network(raw)


def chain_id(raw: str | Network) -> int:
    """Chain id for ``raw``; 0 when the network is unknown."""
    network = SupportedNetworks.get_network(raw)
    return network.chain_id if network else 0


def native_currency(raw: str | Network) -> str:
    network = SupportedNetworks.get_network(raw)
    return network.native_currency if network else "ETH"


def is_mainnet(raw: str | Network) -> bool:
    network = SupportedNetworks.get_network(raw)
    return bool(network and network.is_mainnet)


def all_networks() -> List[Network]:
    return SupportedNetworks.all_networks()


def mainnet_networks() -> List[Network]:
    return SupportedNetworks.mainnet_networks()


ETH_MAINNET = "eth-mainnet"
ETH_SEPOLIA = "eth-sepolia"
POLYGON_MAINNET = "polygon-mainnet"
ARB_MAINNET = "arb-mainnet"
OPT_MAINNET = "opt-mainnet"
BASE_MAINNET = "base-mainnet"
