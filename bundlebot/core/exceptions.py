"""커스텀 예외 정의 (Structured Exception Hierarchy)

애플리케이션 레벨 예외입니다. 공급자 호출 실패는 engine.exceptions 쪽에서
다루며 폴백 체인 밖으로 나오지 않습니다.
"""
from typing import Any, Optional


class BundleBotException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# Spec 변환 관련 예외
class SpecTranslationException(BundleBotException):
    """LLM 기반 Spec 변환 실패 (기본 Spec으로 대체됨)"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Spec translation failed: {reason}"
        super().__init__(message, "SPEC_TRANSLATION_ERROR", details or {"reason": reason})


# 유효성 검증 관련 예외
class ValidationException(BundleBotException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidPromptException(ValidationException):
    """비어 있거나 유효하지 않은 프롬프트"""
    def __init__(self, reason: str = "Missing prompt", details: Optional[dict[str, Any]] = None):
        super().__init__("prompt", reason, details)

