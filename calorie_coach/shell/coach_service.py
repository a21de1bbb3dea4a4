"""Coach Service - Wires the stores to the pure budget and coaching functions.

One instance is built per process by build_service() and injected into the
MCP tools and HTTP routes.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from ..core.budget import (
    calculate_bmi,
    calculate_ring_status,
    compute_daily_budget,
    estimate_midpoint,
    weight_to_target,
)
from ..core.coach import generate_insight
from ..core.history import summarize_week
from ..core.models import (
    Dashboard,
    DailyRecord,
    Gender,
    InsightResult,
    Language,
    MealEstimate,
    MealTime,
    ProfileSettings,
)
from .history_store import HistoryStore
from .settings_store import ProfileSettingsStore
from .storage import FirestoreConfig, create_store


logger = logging.getLogger(__name__)


class CoachService:
    """Application operations over the history and settings stores."""

    def __init__(
        self,
        history: HistoryStore,
        settings: ProfileSettingsStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.history = history
        self.settings = settings
        self._clock = clock

    # ==================== Profile ====================

    def update_profile(
        self,
        height: float | None = None,
        current_weight: float | None = None,
        target_weight: float | None = None,
        gender: Gender | str | None = None,
        language: Language | str | None = None,
    ) -> ProfileSettings | None:
        """Update body metrics and goal. Unset arguments keep their value."""
        if language is not None and not isinstance(language, Language):
            language = Language.resolve(language)
        return self.settings.update(
            height=height,
            current_weight=current_weight,
            target_weight=target_weight,
            gender=gender,
            language=language,
        )

    def sync_health(
        self,
        step_count: int | None = None,
        basal_energy: float | None = None,
        height: float | None = None,
        current_weight: float | None = None,
        gender: Gender | str | None = None,
    ) -> ProfileSettings | None:
        """Record the latest readings from the health data source.

        An unset gender reading never overwrites a gender chosen by hand.
        """
        if gender is not None and Gender(gender) == Gender.UNSET:
            gender = None
        return self.settings.update(
            step_count=step_count,
            basal_energy=basal_energy,
            height=height,
            current_weight=current_weight,
            gender=gender,
        )

    # ==================== Logging ====================

    def log_calories(self, amount: int) -> list[DailyRecord]:
        """Add calories to today's total and return the refreshed week."""
        self.history.add_calories(amount)
        return self.history.get_weekly_records()

    def log_meal(self, estimate: MealEstimate) -> int:
        """Log the midpoint of an estimated calorie range.

        Returns:
            The number of calories logged
        """
        amount = estimate_midpoint(estimate.total_calories_min, estimate.total_calories_max)
        meal_time = MealTime.for_hour(self._clock().hour)
        logger.info(
            "Logging %s (%s): %d-%d kcal",
            estimate.food_list or "unknown food",
            meal_time.value,
            estimate.total_calories_min,
            estimate.total_calories_max,
        )
        self.history.add_calories(amount)
        return amount

    # ==================== Queries ====================

    def get_weekly_records(self) -> list[DailyRecord]:
        return self.history.get_weekly_records()

    def resolve_language(self, language: Language | str | None) -> Language:
        """Explicit language first, then the stored preference."""
        if isinstance(language, Language):
            return language
        if language:
            return Language.resolve(language)
        return self.settings.load().language

    def get_insight(self, language: Language | str | None = None) -> InsightResult:
        profile = self.settings.profile()
        return generate_insight(
            profile,
            self.history.today_calories(),
            self.resolve_language(language),
            today=self._clock().date(),
        )

    def get_dashboard(self, language: Language | str | None = None) -> Dashboard:
        """Compute everything the home screen shows from fresh snapshots."""
        lang = self.resolve_language(language)
        profile = self.settings.profile()
        week = self.history.get_weekly_records()
        today_calories = week[-1].total_calories
        budget = compute_daily_budget(profile)

        return Dashboard(
            profile=profile,
            language=lang,
            daily_budget=budget,
            bmi=round(calculate_bmi(profile), 1),
            kg_to_target=weight_to_target(profile),
            ring=calculate_ring_status(today_calories, budget),
            insight=generate_insight(profile, today_calories, lang, today=self._clock().date()),
            week=summarize_week(week, budget),
        )


def build_service(
    backend: str | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> CoachService:
    """Create the process-wide service from environment configuration.

    Args:
        backend: Storage backend name (defaults to STORAGE_BACKEND or "firestore")
        clock: Returns the current local time

    Returns:
        A CoachService with its own HistoryStore and settings store
    """
    backend = backend or os.environ.get("STORAGE_BACKEND", "firestore")
    storage = create_store(
        backend,
        firestore_config=FirestoreConfig(
            project_id=os.environ.get("FIRESTORE_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", "calorie-coach"),
            device_id=os.environ.get("DEVICE_ID", "default"),
        ),
        path=Path(os.environ.get("DATA_FILE", "calorie_coach_data.json")),
    )
    logger.info("Using %s storage", backend)

    history = HistoryStore(storage, clock=lambda: clock().date())
    return CoachService(history, ProfileSettingsStore(storage), clock=clock)
