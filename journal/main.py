from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journal.api.errors import install_error_handlers
from journal.api.routes_analytics import router as analytics_router
from journal.api.routes_charges import router as charges_router
from journal.api.routes_market import configure_mf_directory, router as market_router
from journal.api.routes_risk import router as risk_router
from journal.core.config import get_settings
from journal.core.logging import init_logging
from journal.market.mf_directory import MutualFundDirectory


def create_app() -> FastAPI:
    settings = get_settings()
    init_logging(settings.log_level)

    configure_mf_directory(MutualFundDirectory.from_settings(settings))

    app = FastAPI(
        title="Trade Journal Calculator",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    install_error_handlers(app)
    app.include_router(charges_router)
    app.include_router(risk_router)
    app.include_router(analytics_router)
    app.include_router(market_router)
    return app


app = create_app()
