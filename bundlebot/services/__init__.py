"""비즈니스 로직 서비스 - export only."""

from .bundle_service import BundleService, create_bundle_service, fallback_bundle
from .spec_service import SpecTranslator, default_spec, normalize_spec

__all__ = [
    "BundleService",
    "create_bundle_service",
    "fallback_bundle",
    "SpecTranslator",
    "default_spec",
    "normalize_spec",
]
