"""MCP Server - Tool definitions for assistant integration.

Defines the MCP tools an assistant can invoke to log meals and read the
calorie budget, weekly trend and coaching advice.
"""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import ValidationError

from ..core.models import MealEstimate
from .coach_service import CoachService
from .storage import StorageError


logger = logging.getLogger(__name__)

INSTRUCTIONS = """Calorie Coach - Personal calorie budget and coaching assistant.

Use these tools to log meals estimated from photos, track today's intake
against a personal daily budget, and show staged coaching advice.

On first use, call setup_profile with the user's height, weight and goal.
When logging a meal, pass the estimated minimum and maximum calories.
After logging, show the updated dashboard."""

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)


def build_mcp(service: CoachService) -> FastMCP:
    """Create the MCP server with tools bound to the given service.

    Args:
        service: The process-wide CoachService

    Returns:
        Configured FastMCP instance
    """
    mcp = FastMCP(
        "calorie-coach",
        instructions=INSTRUCTIONS,
        stateless_http=True,
        transport_security=transport_security,
    )

    # ==================== Profile Tools ====================

    @mcp.tool()
    def setup_profile(
        height: float,
        current_weight: float,
        target_weight: float = 0,
        gender: str = "unset",
        language: str | None = None,
    ) -> dict:
        """Configure the user's body metrics and weight goal.

        Args:
            height: Height in cm (e.g., 170)
            current_weight: Current weight in kg (e.g., 72.5)
            target_weight: Goal weight in kg, 0 for no goal
            gender: "male", "female" or "unset"
            language: Preferred language tag (e.g., "en", "ja", "zh-TW")

        Returns:
            The stored settings and the resulting daily budget
        """
        try:
            settings = service.update_profile(
                height=height,
                current_weight=current_weight,
                target_weight=target_weight,
                gender=gender,
                language=language,
            )
        except ValueError as e:
            return {"error": f"Invalid profile: {e}"}

        if settings is None:
            return {"error": "Failed to save profile. Please try again."}

        dashboard = service.get_dashboard()
        return {
            "settings": settings.model_dump(mode="json"),
            "daily_budget": dashboard.daily_budget,
            "bmi": dashboard.bmi,
        }

    @mcp.tool()
    def sync_health(
        step_count: int | None = None,
        basal_energy: float | None = None,
        height: float | None = None,
        current_weight: float | None = None,
        gender: str | None = None,
    ) -> dict:
        """Record the latest readings from the health app.

        Omitted readings keep their stored value. An "unset" gender reading
        does not replace a gender the user chose.

        Args:
            step_count: Steps walked today
            basal_energy: Resting energy in kcal
            height: Height in cm
            current_weight: Body mass in kg
            gender: "male", "female" or "unset"

        Returns:
            The updated daily budget
        """
        try:
            settings = service.sync_health(
                step_count=step_count,
                basal_energy=basal_energy,
                height=height,
                current_weight=current_weight,
                gender=gender,
            )
        except ValueError as e:
            return {"error": f"Invalid health data: {e}"}

        if settings is None:
            return {"error": "Failed to save health data."}

        return {"daily_budget": service.get_dashboard().daily_budget}

    # ==================== Logging Tools ====================

    @mcp.tool()
    def log_meal(
        calories_min: int,
        calories_max: int,
        food_list: str = "",
        language: str | None = None,
    ) -> dict:
        """Log a meal from an estimated calorie range.

        The midpoint of the range is added to today's total.

        Args:
            calories_min: Lower bound of the estimate
            calories_max: Upper bound of the estimate
            food_list: Detected foods (e.g., "Rice, fried chicken")
            language: Language for the returned advice

        Returns:
            Logged calories and the updated dashboard
        """
        try:
            estimate = MealEstimate(
                food_list=food_list,
                total_calories_min=calories_min,
                total_calories_max=calories_max,
            )
        except ValidationError as e:
            return {"error": f"Invalid estimate: {e}"}

        try:
            logged = service.log_meal(estimate)
        except StorageError:
            return {"error": "History is unavailable right now. The meal was not logged."}

        dashboard = service.get_dashboard(language)
        return {
            "logged_calories": logged,
            "dashboard": dashboard.model_dump(mode="json"),
        }

    # ==================== Query Tools ====================

    @mcp.tool()
    def get_dashboard(language: str | None = None) -> dict:
        """Get today's budget, intake ring, coaching advice and weekly trend.

        Args:
            language: Language tag for the advice text

        Returns:
            Dictionary with the full dashboard
        """
        return service.get_dashboard(language).model_dump(mode="json")

    @mcp.tool()
    def get_weekly_history() -> list[dict]:
        """Get calories for the last 7 days, oldest first, including today.

        Returns:
            List of {date, calories}; days without logs show 0
        """
        return [
            {"date": r.date_string, "calories": r.total_calories}
            for r in service.get_weekly_records()
        ]

    @mcp.tool()
    def get_insight(language: str | None = None) -> dict:
        """Get the coaching card for today.

        Args:
            language: Language tag for the advice text

        Returns:
            Title, advice and the health tip of the day
        """
        return service.get_insight(language).model_dump(mode="json")

    return mcp
