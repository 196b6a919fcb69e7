"""TCP listener package for fetchplay."""

from .client import RequestClient
from .server import FetchPlayServer, serve

__all__ = ["FetchPlayServer", "RequestClient", "serve"]
