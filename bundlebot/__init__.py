"""BundleBot - 예산 기반 쇼핑 번들 추천 서비스"""

__version__ = "0.1.0"
