"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 dict/list/primitive)
- 엔진/네트워크 의존 없음
"""

from .api_payloads import API_PAYLOADS
from .candidate_sets import CANDIDATE_SETS
from .provider_payloads import APIFY_PAYLOADS, OPENAI_PAYLOADS, RAPIDAPI_PAYLOADS

__all__ = [
    "API_PAYLOADS",
    "CANDIDATE_SETS",
    "APIFY_PAYLOADS",
    "OPENAI_PAYLOADS",
    "RAPIDAPI_PAYLOADS",
]
