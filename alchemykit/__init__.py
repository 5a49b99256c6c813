"""
alchemykit - async client for Alchemy's node, data and webhook APIs.
"""

__version__ = "0.1.0"
__logo__ = "⚗️"

from alchemykit.client import Alchemy  # noqa: E402
from alchemykit.config import AlchemyConfig  # noqa: E402
from alchemykit.network import Network, SupportedNetworks, get_network  # noqa: E402
from alchemykit.pagination import Page, PageIterator  # noqa: E402
from alchemykit.transport import BatchCall, BatchResult, call_scope  # noqa: E402
from alchemykit.utils.exceptions import AlchemyError, ErrorKind  # noqa: E402

__all__ = [
    "__version__",
    "Alchemy",
    "AlchemyConfig",
    "Network",
    "SupportedNetworks",
    "get_network",
    "Page",
    "PageIterator",
    "BatchCall",
    "BatchResult",
    "call_scope",
    "AlchemyError",
    "ErrorKind",
]
