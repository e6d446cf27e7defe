"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api.api.v1 import health
from users_api.api.v1 import router as v1_router
from users_api.core.config import Settings, get_settings
from users_api.core.gateway import GatewaySecretMiddleware
from users_api.core.security import JwtTokenService


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application. Raises JwtConfigurationError when the signing key is
    missing or too short, so a misconfigured service never starts.
    """
    settings = settings or get_settings()
    jwt_service = JwtTokenService.from_settings(settings)

    app = FastAPI(
        title="Users API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.jwt_service = jwt_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or (["*"] if settings.APP_ENV == "dev" else []),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it runs first.
    app.add_middleware(
        GatewaySecretMiddleware,
        secret=settings.GATEWAY_SECRET.get_secret_value() if settings.GATEWAY_SECRET else None,
        environment=settings.APP_ENV,
    )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Users API"}

    return app


app = create_app()
