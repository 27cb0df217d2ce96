"""Product-search providers (RapidAPI, Apify, synthetic) and the fallback chain.

공개 API는 이 파일에서만 export합니다.
"""

from .base import ProviderAdapter
from .apify import ApifyActorProvider, JobState
from .chain import SourceFallbackChain
from .http_client import JsonResponse, SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .normalization import FieldRules, RowNormalizer, build_reason, parse_price
from .rapidapi import RapidApiShoppingProvider
from .synthetic import SyntheticProvider

__all__ = [
    "ProviderAdapter",
    "ApifyActorProvider",
    "JobState",
    "SourceFallbackChain",
    "JsonResponse",
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "FieldRules",
    "RowNormalizer",
    "build_reason",
    "parse_price",
    "RapidApiShoppingProvider",
    "SyntheticProvider",
]
