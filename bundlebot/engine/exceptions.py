"""Provider Exceptions - Sourcing failure hierarchy

공급자 어댑터가 던지는 예외입니다. 모두 SourceFallbackChain에서 회복되며
Aggregator 밖으로 전파되지 않습니다.
"""

from typing import Optional


class ProviderError(Exception):
    """공급자 호출 실패

    네트워크 오류, 비정상 HTTP 상태, 파싱 불가 응답, 정규화 후 0건인 경우
    """

    def __init__(self, provider: str, reason: str, status: Optional[int] = None):
        self.provider = provider
        self.reason = reason
        self.status = status
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.status is not None:
            return f"{self.provider} {self.status}: {self.reason}"
        return f"{self.provider}: {self.reason}"


class TimeoutError(ProviderError):
    """작업형 공급자 타임아웃

    원격 작업이 제한 시간 안에 성공 상태에 도달하지 못했거나
    FAILED/ABORTED/TIMED_OUT 종료 상태에 도달한 경우
    """

    def __init__(self, provider: str, reason: str, state: Optional[str] = None):
        self.state = state
        super().__init__(provider, reason)
