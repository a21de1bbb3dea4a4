"""Tests for CoachService - stores wired to the budget and coaching logic."""

from datetime import datetime

import pytest

from calorie_coach.core.coach import get_daily_knowledge
from calorie_coach.core.messages import OVER_BUDGET_ADVICE
from calorie_coach.core.models import Gender, InsightBranch, Language, MealEstimate
from calorie_coach.shell.coach_service import CoachService, build_service
from calorie_coach.shell.history_store import HistoryStore
from calorie_coach.shell.settings_store import ProfileSettingsStore
from calorie_coach.shell.storage import InMemoryKeyValueStore


NOW = datetime(2025, 3, 10, 12, 30)


@pytest.fixture
def service():
    storage = InMemoryKeyValueStore()
    history = HistoryStore(storage, clock=lambda: NOW.date())
    return CoachService(history, ProfileSettingsStore(storage), clock=lambda: NOW)


class TestProfile:
    """Tests for profile updates."""

    def test_update_profile(self, service):
        """Profile fields are stored."""
        settings = service.update_profile(
            height=170, current_weight=80, target_weight=70, gender="male"
        )
        assert settings.gender == Gender.MALE
        assert service.settings.profile().target_weight == 70

    def test_language_tag_resolved(self, service):
        """Locale tags are mapped to a supported language."""
        settings = service.update_profile(language="zh-TW")
        assert settings.language == Language.TRADITIONAL_CHINESE

    def test_unknown_language_falls_back(self, service):
        """Unsupported locales are stored as English."""
        settings = service.update_profile(language="de-DE")
        assert settings.language == Language.ENGLISH

    def test_sync_health_updates_activity(self, service):
        """Steps and basal energy feed the next budget."""
        service.update_profile(height=170, current_weight=70)
        service.sync_health(step_count=5000, basal_energy=1600)
        # 1600 * 1.375
        assert service.get_dashboard().daily_budget == 2200

    def test_sync_health_keeps_manual_gender(self, service):
        """An unset gender reading does not clear the chosen one."""
        service.update_profile(gender="female")
        service.sync_health(step_count=100, gender="unset")
        assert service.settings.load().gender == Gender.FEMALE

    def test_sync_health_sets_known_gender(self, service):
        service.sync_health(gender="male")
        assert service.settings.load().gender == Gender.MALE


class TestLogging:
    """Tests for meal logging."""

    def test_log_meal_uses_midpoint(self, service):
        """The midpoint of the estimate is added to today."""
        estimate = MealEstimate(
            food_list="Ramen", total_calories_min=400, total_calories_max=600
        )
        assert service.log_meal(estimate) == 500
        assert service.history.today_calories() == 500

    def test_log_calories_returns_week(self, service):
        """Logging returns the refreshed seven days."""
        week = service.log_calories(320)
        assert len(week) == 7
        assert week[-1].total_calories == 320


class TestDashboard:
    """Tests for CoachService.get_dashboard."""

    def test_default_profile(self, service):
        """No profile yet gives the unset-gender default budget."""
        dashboard = service.get_dashboard()
        assert dashboard.daily_budget == 1600
        assert dashboard.ring.intake == 0
        assert dashboard.bmi == 0
        assert len(dashboard.week.bars) == 7

    def test_ring_reflects_today(self, service):
        """Logged calories show up in the ring and the week."""
        service.update_profile(height=170, current_weight=70)
        service.log_calories(1000)
        dashboard = service.get_dashboard()

        assert dashboard.ring.intake == 1000
        assert dashboard.ring.remaining == dashboard.daily_budget - 1000
        assert dashboard.week.days_logged == 1

    def test_over_budget_advice(self, service):
        """Overeating during weight loss shows corrective advice."""
        service.update_profile(height=170, current_weight=80, target_weight=70)
        service.log_calories(5000)
        dashboard = service.get_dashboard("en")

        assert dashboard.ring.is_over is True
        assert dashboard.insight.branch == InsightBranch.LOSS_START
        assert dashboard.insight.advice == OVER_BUDGET_ADVICE[Language.ENGLISH]

    def test_stored_language_used_by_default(self, service):
        """Without an explicit language the stored preference applies."""
        service.update_profile(language="ja")
        dashboard = service.get_dashboard()
        assert dashboard.language == Language.JAPANESE
        assert dashboard.insight.knowledge == get_daily_knowledge(Language.JAPANESE, NOW.date())

    def test_explicit_language_wins(self, service):
        service.update_profile(language="ja")
        assert service.get_dashboard("zh-Hant").language == Language.TRADITIONAL_CHINESE

    def test_kg_to_target(self, service):
        service.update_profile(height=170, current_weight=80, target_weight=72.5)
        assert service.get_dashboard().kg_to_target == 7.5

    def test_insight_matches_dashboard(self, service):
        """get_insight returns the dashboard's coaching card."""
        service.update_profile(height=170, current_weight=65)
        assert service.get_insight("en") == service.get_dashboard("en").insight


class TestBuildService:
    """Tests for build_service."""

    def test_memory_backend(self):
        """Services get independent stores."""
        first = build_service("memory")
        second = build_service("memory")
        first.log_calories(100)

        assert first.history.today_calories() == 100
        assert second.history.today_calories() == 0

    def test_backend_from_environment(self, monkeypatch, tmp_path):
        """STORAGE_BACKEND and DATA_FILE select the file backend."""
        monkeypatch.setenv("STORAGE_BACKEND", "file")
        monkeypatch.setenv("DATA_FILE", str(tmp_path / "coach.json"))

        build_service().log_calories(42)
        assert build_service().history.today_calories() == 42
