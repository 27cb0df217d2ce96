"""BudgetManager 단위 테스트"""

import pytest

from bundlebot.engine import BudgetConfig, BudgetManager
from tests.fakes import FakeClock


class TestBudgetConfig:
    def test_defaults(self):
        config = BudgetConfig()
        assert config.total_budget == 25.0
        assert config.provider_timeout == 8.0
        assert config.job_timeout == 15.0

    def test_provider_timeout_cannot_exceed_total(self):
        with pytest.raises(ValueError):
            BudgetConfig(total_budget=5.0, provider_timeout=8.0)

    def test_total_must_be_positive(self):
        with pytest.raises(ValueError):
            BudgetConfig(total_budget=0)


class TestBudgetManager:
    def test_checkpoint_requires_start(self):
        manager = BudgetManager()
        with pytest.raises(RuntimeError):
            manager.checkpoint("spec")

    def test_elapsed_before_start_is_zero(self):
        assert BudgetManager(clock=FakeClock(100.0)).elapsed() == 0.0

    def test_timeouts_shrink_with_remaining_budget(self):
        clock = FakeClock()
        manager = BudgetManager(BudgetConfig(total_budget=20.0, provider_timeout=8.0, job_timeout=15.0), clock=clock)
        manager.start()

        assert manager.get_timeout_for("provider") == 8.0
        assert manager.get_timeout_for("job") == 15.0

        clock.advance(14.0)
        assert manager.get_timeout_for("provider") == 6.0
        assert manager.get_timeout_for("job") == 6.0
        assert manager.get_timeout_for("other") == 6.0

    def test_exhausted_below_min_remaining(self):
        clock = FakeClock()
        manager = BudgetManager(BudgetConfig(total_budget=10.0, provider_timeout=5.0, min_remaining=0.5), clock=clock)
        manager.start()

        clock.advance(9.4)
        assert manager.is_exhausted() is False

        clock.advance(0.2)
        assert manager.is_exhausted() is True

        clock.advance(100)
        assert manager.remaining() == 0.0

    def test_report(self):
        clock = FakeClock()
        manager = BudgetManager(BudgetConfig(total_budget=10.0, provider_timeout=5.0), clock=clock).start()
        clock.advance(1.25)
        manager.checkpoint("spec")
        clock.advance(0.5)

        report = manager.get_report()

        assert report["total_budget"] == 10.0
        assert report["elapsed"] == 1.75
        assert report["checkpoints"] == {"spec": 1.25}
        assert report["is_exhausted"] is False
