"""Read pipeline — Cache → Fetch → Snapshot fallback → Search → Sort.

Components:
- Orchestrator: Main coordinator
- Fetcher: Open Brewery DB → SourceRecords
"""

from brewfeed.pipeline.fetcher import Fetcher
from brewfeed.pipeline.orchestrator import CACHE_KEY, Orchestrator

__all__ = ["CACHE_KEY", "Fetcher", "Orchestrator"]
