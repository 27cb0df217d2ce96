"""로그 마스킹 테스트"""

import pytest

from bundlebot.core.logging import sanitize_for_log


class TestSanitizeForLog:
    def test_plain_prompt_unchanged(self):
        assert sanitize_for_log("college dorm essentials") == "college dorm essentials"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("dorm stuff token=abc123", "dorm stuff token=***"),
            ("api_key: sk-live-xyz for a desk lamp", "api_key: *** for a desk lamp"),
            ("PASSWORD=hunter2 gaming chair", "PASSWORD=*** gaming chair"),
            ("secret = s3cr3t kitchen set", "secret = *** kitchen set"),
        ],
    )
    def test_masks_only_assigned_value(self, raw, expected):
        assert sanitize_for_log(raw) == expected

    def test_keywords_without_value_kept(self):
        prompt = "secret santa gift for a board game token collector"
        assert sanitize_for_log(prompt) == prompt

    def test_key_like_strings_masked(self):
        assert sanitize_for_log("use sk-abcdefgh12345 for camping gear") == "use *** for camping gear"
        assert sanitize_for_log("Bearer abcdefgh.ijk lamp") == "*** lamp"

    def test_truncated(self):
        assert sanitize_for_log("a" * 150, max_length=100) == "a" * 100 + "..."

    def test_empty(self):
        assert sanitize_for_log("") == "[empty]"
