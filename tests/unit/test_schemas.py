"""스키마 유효성 테스트"""

import math

import pytest
from pydantic import ValidationError

from bundlebot.schemas import PLACEHOLDER_IMAGE, BuildBundleRequest, Candidate, Spec


class TestCandidate:
    def test_defaults(self):
        candidate = Candidate(name="Lamp", price=10, link="https://x.example.com", source="demo")

        assert candidate.image == PLACEHOLDER_IMAGE
        assert candidate.reason == "Good value"
        assert candidate.category is None

    @pytest.mark.parametrize("price", [math.nan, math.inf, -1])
    def test_invalid_price(self, price):
        with pytest.raises(ValidationError):
            Candidate(name="Lamp", price=price, link="https://x.example.com", source="demo")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Candidate(name="", price=1, link="https://x.example.com", source="demo")

    def test_with_category_returns_copy(self):
        candidate = Candidate(name="Lamp", price=10, link="https://x.example.com", source="demo")

        tagged = candidate.with_category("lighting")

        assert tagged.category == "lighting"
        assert candidate.category is None

    def test_frozen(self):
        candidate = Candidate(name="Lamp", price=10, link="https://x.example.com", source="demo")
        with pytest.raises(ValidationError):
            candidate.price = 1  # type: ignore[misc]


class TestSpec:
    def test_budget_must_be_positive_and_finite(self):
        with pytest.raises(ValidationError):
            Spec(title="t", budget=0, max_items=3)
        with pytest.raises(ValidationError):
            Spec(title="t", budget=math.inf, max_items=3)

    def test_budget_rounded_to_cents(self):
        assert Spec(title="t", budget=50.006, max_items=3).budget == 50.01
        assert Spec(title="t", budget=75.5, max_items=3).budget == 75.5

    def test_budget_below_one_cent_rejected(self):
        with pytest.raises(ValidationError):
            Spec(title="t", budget=0.004, max_items=3)

    def test_max_items_at_least_one(self):
        with pytest.raises(ValidationError):
            Spec(title="t", budget=10, max_items=0)


class TestBuildBundleRequest:
    @pytest.mark.parametrize("raw, expected", [("75", 75.0), (60, 60.0), ("abc", None), (0, None), (None, None), (True, None)])
    def test_budget_coercion(self, raw, expected):
        assert BuildBundleRequest(prompt="x", budget=raw).budget == expected

    def test_prompt_coercion(self):
        assert BuildBundleRequest().prompt == ""
        assert BuildBundleRequest(prompt="  dorm  ").prompt == "dorm"
        assert BuildBundleRequest(prompt=None).prompt == ""

    def test_long_prompt_accepted(self):
        prompt = "dorm " * 1000
        assert BuildBundleRequest(prompt=prompt).prompt == prompt.strip()

    def test_debug_defaults_false(self):
        assert BuildBundleRequest(prompt="x").debug is False
