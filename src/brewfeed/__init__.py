"""brewfeed — cached, fallback-aware brewery data access.

Fetches brewery records from Open Brewery DB, keeps the latest set in an
in-memory cache and a local snapshot file, and serves searched and sorted
views of it.
"""

__version__ = "0.1.0"
