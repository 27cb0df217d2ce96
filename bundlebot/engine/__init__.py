"""Engine Layer - Candidate sourcing and bundle composition

This module provides the core engine layer, implementing:
- CandidateCache: Process-local TTL cache (45 min, lazy expiry)
- CandidateAggregator: Per-category cache-or-fetch with bounded fan-out
- BundleComposer: Budget-aware greedy selection
- BudgetManager: Per-request time budget
- SourcingResult / AggregationReport: Standardized result format
- ExecutionStrategy: Fallback and caching decisions
- Exceptions: Provider failure hierarchy
"""

from .aggregator import CandidateAggregator, resolve_categories
from .budget import BudgetConfig, BudgetManager
from .cache import CandidateCache, build_cache_key
from .composer import BundleComposer
from .exceptions import ProviderError, TimeoutError
from .result import AggregationReport, SourcingResult
from .strategy import ExecutionPath, ExecutionStrategy

__all__ = [
    "CandidateAggregator",
    "resolve_categories",
    "BudgetManager",
    "BudgetConfig",
    "CandidateCache",
    "build_cache_key",
    "BundleComposer",
    "AggregationReport",
    "SourcingResult",
    "ExecutionStrategy",
    "ExecutionPath",
    # Exceptions
    "ProviderError",
    "TimeoutError",
]
