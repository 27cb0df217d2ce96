"""Pydantic 스키마 - export only."""

from .bundle_schema import (
    PLACEHOLDER_IMAGE,
    BuildBundleRequest,
    Bundle,
    BundleResponse,
    Candidate,
    DebugInfo,
    ErrorResponse,
    HealthResponse,
    Spec,
)

__all__ = [
    "PLACEHOLDER_IMAGE",
    "BuildBundleRequest",
    "Bundle",
    "BundleResponse",
    "Candidate",
    "DebugInfo",
    "ErrorResponse",
    "HealthResponse",
    "Spec",
]
