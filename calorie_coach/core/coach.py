"""Health Coach - Pure functions for staged coaching advice.

Branch selection is an ordered rule table over facts derived from the
profile; the first matching rule wins. Text comes from messages.py.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable

from .budget import calculate_bmi, compute_daily_budget
from .messages import knowledge_tips, render_advice, render_over_budget, render_title
from .models import InsightBranch, InsightResult, Language, UserProfile


MAINTENANCE_TOLERANCE_KG = 1.0
OVERWEIGHT_BMI = 25.0
UNDERWEIGHT_BMI = 18.5
ACTIVE_STEPS = 6000
START_PHASE_KG = 5.0
FAT_BURN_PHASE_KG = 2.0


@dataclass(frozen=True)
class GoalFacts:
    """Values the coaching rules are evaluated against."""

    diff: float
    bmi: float
    steps: int
    is_maintenance: bool
    is_weight_loss: bool


def derive_facts(profile: UserProfile) -> GoalFacts:
    diff = profile.current_weight - profile.target_weight
    is_maintenance = profile.target_weight <= 0 or abs(diff) < MAINTENANCE_TOLERANCE_KG
    return GoalFacts(
        diff=diff,
        bmi=calculate_bmi(profile),
        steps=profile.step_count,
        is_maintenance=is_maintenance,
        is_weight_loss=not is_maintenance and diff > 0,
    )


RULES: list[tuple[InsightBranch, Callable[[GoalFacts], bool]]] = [
    (InsightBranch.MAINTAIN_OVERWEIGHT, lambda f: f.is_maintenance and f.bmi > OVERWEIGHT_BMI),
    (InsightBranch.MAINTAIN_UNDERWEIGHT, lambda f: f.is_maintenance and 0 < f.bmi < UNDERWEIGHT_BMI),
    (InsightBranch.MAINTAIN_LOW_ACTIVITY, lambda f: f.is_maintenance and f.steps < ACTIVE_STEPS),
    (InsightBranch.MAINTAIN_ACTIVE, lambda f: f.is_maintenance),
    (InsightBranch.LOSS_START, lambda f: f.is_weight_loss and f.diff > START_PHASE_KG),
    (InsightBranch.LOSS_FAT_BURN, lambda f: f.is_weight_loss and f.diff > FAT_BURN_PHASE_KG),
    (InsightBranch.LOSS_FINAL_SPRINT, lambda f: f.is_weight_loss),
]

LOSS_BRANCHES = {
    InsightBranch.LOSS_START,
    InsightBranch.LOSS_FAT_BURN,
    InsightBranch.LOSS_FINAL_SPRINT,
}


def classify(facts: GoalFacts) -> InsightBranch:
    """Return the first rule whose predicate holds; otherwise the goal is gain."""
    for branch, applies in RULES:
        if applies(facts):
            return branch
    return InsightBranch.GAIN_MUSCLE


def knowledge_index(today: date) -> int:
    """Index of the tip of the day: day of year (1-based) modulo 7."""
    return today.timetuple().tm_yday % 7


def get_daily_knowledge(language: Language, today: date | None = None) -> str:
    """Rotating health tip, identical for every user on a given day.

    Args:
        language: Display language
        today: Date to pick the tip for (defaults to today)

    Returns:
        One of seven localized tips
    """
    if today is None:
        today = date.today()
    return knowledge_tips(language)[knowledge_index(today)]


def generate_insight(
    profile: UserProfile,
    today_calories: int,
    language: Language,
    today: date | None = None,
) -> InsightResult:
    """Build the coaching card for the current profile and today's intake.

    During weight loss the phase advice is replaced by a corrective message
    when today's intake exceeds the daily budget.

    Args:
        profile: The user's profile snapshot
        today_calories: Calories logged today
        language: Display language
        today: Date used for the daily tip (defaults to today)

    Returns:
        InsightResult with title, advice and the tip of the day
    """
    facts = derive_facts(profile)
    branch = classify(facts)
    context = {"bmi": facts.bmi, "steps": facts.steps}

    title = render_title(branch, language, **context)
    advice = render_advice(branch, language, **context)

    over_budget = branch in LOSS_BRANCHES and today_calories > compute_daily_budget(profile)
    if over_budget:
        advice = render_over_budget(language)

    return InsightResult(
        branch=branch,
        over_budget=over_budget,
        title=title,
        advice=advice,
        knowledge=get_daily_knowledge(language, today),
    )
