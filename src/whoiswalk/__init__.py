"""whoiswalk package"""

from .exceptions import ServerMismatchError, WhoisConnectionError, WhoisError
from .models import DomainInfo, DomainResponse
from .tld import TldModule
from .tld_server import TldServer

__all__ = [
    "DomainInfo",
    "DomainResponse",
    "ServerMismatchError",
    "TldModule",
    "TldServer",
    "WhoisConnectionError",
    "WhoisError",
]
