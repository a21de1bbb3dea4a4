"""Calorie Coach Server - Entry point.

Runs the MCP server and the JSON routes used by the mobile client with
HTTP transport. Uses Starlette with the MCP HTTP app mounted at root.
"""

import logging
import os

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from .core.models import MealEstimate
from .shell.coach_service import CoachService, build_service
from .shell.mcp_server import build_mcp
from .shell.storage import StorageError


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ==================== Create ASGI App ====================


def create_app(service: CoachService | None = None) -> Starlette:
    """Create the Starlette application with MCP at root.

    The service is built once here and shared by the MCP tools and the
    JSON routes, so there is exactly one HistoryStore per process.

    Args:
        service: Service to use (defaults to one built from the environment)
    """
    if service is None:
        service = build_service()

    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse({"status": "healthy", "service": "calorie-coach"})

    async def get_dashboard(request: Request) -> JSONResponse:
        """Budget, ring, coaching and weekly trend for the home screen."""
        language = request.query_params.get("lang")
        dashboard = service.get_dashboard(language)
        return JSONResponse(dashboard.model_dump(mode="json"))

    async def log_meal(request: Request) -> JSONResponse:
        """Log a meal from the estimation service's response payload."""
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body must be JSON"}, status_code=400)

        try:
            estimate = MealEstimate.model_validate(body)
        except ValidationError as e:
            logger.warning("Rejected meal payload: %s", str(e))
            return JSONResponse({"error": "Invalid meal estimate"}, status_code=400)

        try:
            logged = service.log_meal(estimate)
        except StorageError:
            return JSONResponse(
                {"error": "History is unavailable. The meal was not logged."},
                status_code=503,
            )

        dashboard = service.get_dashboard(request.query_params.get("lang"))
        return JSONResponse({
            "logged_calories": logged,
            "dashboard": dashboard.model_dump(mode="json"),
        })

    mcp_app = build_mcp(service).streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/dashboard", get_dashboard, methods=["GET"]),
        Route("/meals", log_meal, methods=["POST"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    return Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["http://localhost:5173"],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting Calorie Coach server on %s:%d", host, port)

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
