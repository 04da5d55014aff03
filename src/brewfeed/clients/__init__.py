"""HTTP client layer for brewfeed.

Async clients for reading brewery data from Open Brewery DB.
"""

from brewfeed.clients.base import BaseAsyncClient, RateLimiter
from brewfeed.clients.open_brewery import OpenBreweryClient

__all__ = [
    "BaseAsyncClient",
    "RateLimiter",
    "OpenBreweryClient",
]
