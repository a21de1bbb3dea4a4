"""Budget Calculations - Pure functions for daily energy math.

All functions are pure: same input always produces same output, no side effects.
"""

from .models import Gender, RingStatus, UserProfile


MINIMUM_DAILY_BUDGET = 1200
GOAL_ADJUSTMENT = 300
MAINTENANCE_TOLERANCE_KG = 1.0
KCAL_PER_KG_FALLBACK = 24

DEFAULT_BUDGETS = {
    Gender.MALE: 2000,
    Gender.FEMALE: 1500,
    Gender.UNSET: 1600,
}

# (upper bound of steps, exclusive) -> multiplier
ACTIVITY_LEVELS = [
    (3000, 1.2),
    (8000, 1.375),
    (12000, 1.55),
]
MAX_ACTIVITY_MULTIPLIER = 1.725


def activity_multiplier(step_count: int) -> float:
    """Pick the activity factor for today's step count.

    Args:
        step_count: Steps walked today

    Returns:
        1.2 (sedentary) up to 1.725 (very active)
    """
    for upper_bound, multiplier in ACTIVITY_LEVELS:
        if step_count < upper_bound:
            return multiplier
    return MAX_ACTIVITY_MULTIPLIER


def compute_daily_budget(profile: UserProfile) -> int:
    """Estimate the daily calorie budget (TDEE adjusted for the weight goal).

    Without a known weight the budget falls back to a constant per gender.
    Resting energy comes from the health sync when available, otherwise it is
    approximated as 24 kcal per kg of body weight.

    Args:
        profile: The user's profile snapshot

    Returns:
        Budget in kcal, truncated, never below 1200
    """
    if profile.current_weight <= 0:
        return DEFAULT_BUDGETS.get(profile.gender, DEFAULT_BUDGETS[Gender.UNSET])

    if profile.basal_energy > 0:
        base = profile.basal_energy
    else:
        base = profile.current_weight * KCAL_PER_KG_FALLBACK

    tdee = base * activity_multiplier(profile.step_count)

    if profile.target_weight > 0:
        if profile.target_weight < profile.current_weight - MAINTENANCE_TOLERANCE_KG:
            tdee -= GOAL_ADJUSTMENT
        if profile.target_weight > profile.current_weight + MAINTENANCE_TOLERANCE_KG:
            tdee += GOAL_ADJUSTMENT

    return max(MINIMUM_DAILY_BUDGET, int(tdee))


def calculate_bmi(profile: UserProfile) -> float:
    """Body mass index, or 0.0 when height or weight is missing."""
    if profile.height <= 0 or profile.current_weight <= 0:
        return 0.0
    height_m = profile.height / 100
    return profile.current_weight / (height_m * height_m)


def weight_to_target(profile: UserProfile) -> float:
    """Kilograms between current and target weight (0 when no target is set)."""
    if profile.target_weight <= 0 or profile.current_weight <= 0:
        return 0.0
    return round(abs(profile.target_weight - profile.current_weight), 1)


def calculate_ring_status(intake: int, limit: int) -> RingStatus:
    """Compare today's intake with the budget.

    Args:
        intake: Calories logged today
        limit: Daily budget

    Returns:
        RingStatus with remaining calories and progress capped at 1.0
    """
    progress = min(intake / limit, 1.0) if limit > 0 else 1.0
    return RingStatus(
        intake=intake,
        limit=limit,
        remaining=limit - intake,
        is_over=intake > limit,
        progress=round(progress, 3),
    )


def estimate_midpoint(calories_min: int, calories_max: int) -> int:
    """Single calorie value to log for an estimated range."""
    return (calories_min + calories_max) // 2
