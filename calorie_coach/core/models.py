"""Core Data Models - Pydantic models for type safety.

All models are value objects with no behavior beyond validation and
trivial conversion. Calculations live in budget.py, coach.py and history.py.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    """Biological sex as used for the default budget."""

    MALE = "male"
    FEMALE = "female"
    UNSET = "unset"


class Language(str, Enum):
    """Supported display languages."""

    TRADITIONAL_CHINESE = "zh-Hant"
    ENGLISH = "en"
    JAPANESE = "ja"

    @classmethod
    def resolve(cls, tag: str | None) -> "Language":
        """Map a locale tag to a supported language, defaulting to English.

        Simplified Chinese falls back to Traditional Chinese.
        """
        if not tag:
            return cls.ENGLISH
        normalized = tag.strip()
        for variant in ("zh-Hant", "zh-TW", "zh-HK", "zh-Hans", "zh-CN"):
            if normalized.lower().startswith(variant.lower()):
                return cls.TRADITIONAL_CHINESE
        if normalized.lower().startswith("ja"):
            return cls.JAPANESE
        return cls.ENGLISH


class MealTime(str, Enum):
    """Meal slot derived from the hour of day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def for_hour(cls, hour: int) -> "MealTime":
        if 5 <= hour < 11:
            return cls.BREAKFAST
        if 11 <= hour < 14:
            return cls.LUNCH
        if 17 <= hour < 21:
            return cls.DINNER
        return cls.SNACK


class UserProfile(BaseModel):
    """Snapshot of the user's body metrics and activity for today.

    Height and weight are not validated as positive: calculations degrade
    to defaults instead of failing.
    """

    model_config = ConfigDict(frozen=True)

    height: float = Field(default=0, description="Height in cm")
    current_weight: float = Field(default=0, description="Current weight in kg")
    target_weight: float = Field(default=0, description="Goal weight in kg, <= 0 means unset")
    step_count: int = Field(default=0, ge=0, description="Today's pedometer count")
    basal_energy: float = Field(default=0, ge=0, description="Resting energy in kcal, 0 if unknown")
    gender: Gender = Gender.UNSET


class ProfileSettings(BaseModel):
    """Persisted user settings the profile is rebuilt from."""

    height: float = 0
    current_weight: float = 0
    target_weight: float = 0
    gender: Gender = Gender.UNSET
    step_count: int = Field(default=0, ge=0, description="Steps from the last health sync")
    basal_energy: float = Field(default=0, ge=0, description="Basal energy from the last health sync")
    language: Language = Language.ENGLISH
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_profile(self) -> UserProfile:
        return UserProfile(
            height=self.height,
            current_weight=self.current_weight,
            target_weight=self.target_weight,
            step_count=self.step_count,
            basal_energy=self.basal_energy,
            gender=self.gender,
        )


class DailyRecord(BaseModel):
    """Total calories logged on one calendar day."""

    model_config = ConfigDict(populate_by_name=True)

    date_string: str = Field(
        alias="dateString",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Calendar day as YYYY-MM-DD",
    )
    total_calories: int = Field(alias="totalCalories", ge=0)


class InsightBranch(str, Enum):
    """Coaching rule that produced an insight."""

    MAINTAIN_OVERWEIGHT = "maintain_overweight"
    MAINTAIN_UNDERWEIGHT = "maintain_underweight"
    MAINTAIN_LOW_ACTIVITY = "maintain_low_activity"
    MAINTAIN_ACTIVE = "maintain_active"
    LOSS_START = "loss_start"
    LOSS_FAT_BURN = "loss_fat_burn"
    LOSS_FINAL_SPRINT = "loss_final_sprint"
    GAIN_MUSCLE = "gain_muscle"


class InsightResult(BaseModel):
    """Coaching text for the current profile and intake."""

    branch: InsightBranch = Field(description="Rule that fired")
    over_budget: bool = Field(default=False, description="Advice replaced by the corrective message")
    title: str
    advice: str
    knowledge: str


class RingStatus(BaseModel):
    """Today's intake against the daily budget."""

    intake: int = Field(ge=0)
    limit: int = Field(ge=0)
    remaining: int = Field(description="Negative if over budget")
    is_over: bool
    progress: float = Field(ge=0, le=1)


class DayBar(BaseModel):
    """One bar of the weekly trend chart."""

    date_string: str
    total_calories: int
    status: Literal["ok", "near", "over"]


class WeeklySummary(BaseModel):
    """Seven-day trend ending today."""

    daily_budget: int
    bars: list[DayBar]
    total_calories: int
    days_logged: int
    avg_daily_calories: float
    deficit: int = Field(description="days_logged * budget - total. Positive = ate less than budget.")


class Macronutrients(BaseModel):
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)


class MealEstimate(BaseModel):
    """Result returned by the external calorie estimation service."""

    model_config = ConfigDict(populate_by_name=True)

    food_list: str = Field(default="", alias="foodList")
    total_calories_min: int = Field(alias="totalCaloriesMin", ge=0)
    total_calories_max: int = Field(alias="totalCaloriesMax", ge=0)
    reasoning: Optional[str] = None
    macros: Optional[Macronutrients] = None
    health_tip: Optional[str] = Field(default=None, alias="healthTip")


class Dashboard(BaseModel):
    """Everything the home screen shows."""

    profile: UserProfile
    language: Language
    daily_budget: int
    bmi: float
    kg_to_target: float
    ring: RingStatus
    insight: InsightResult
    week: WeeklySummary
