"""API 요청 자산 (FE에서 보내는 형식)"""

API_PAYLOADS = {
    "dorm": {"prompt": "college dorm essentials", "budget": 60},
    "dorm_debug": {"prompt": "college dorm essentials", "budget": 60, "debug": True},
    "no_budget": {"prompt": "camping weekend"},
    "string_budget": {"prompt": "home office", "budget": "abc"},
    "empty_prompt": {"prompt": "   ", "budget": 100},
    "missing_prompt": {"budget": 100},
}
