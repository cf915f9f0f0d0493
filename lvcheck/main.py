import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lvcheck.api.routes_calculator import router as calculator_router
from lvcheck.api.routes_history import configure_trade_store, router as history_router
from lvcheck.api.routes_market import configure_price_feed, router as market_router
from lvcheck.core.config import get_settings
from lvcheck.core.logging import init_logging
from lvcheck.journal.trade_store import TradeStore
from lvcheck.market.price_feed import BinancePriceFeed


def create_app() -> FastAPI:
    settings = get_settings()
    init_logging(settings.log_level)

    configure_trade_store(TradeStore())
    configure_price_feed(BinancePriceFeed.from_settings(settings))

    app = FastAPI(
        title="lvcheck Leverage & Risk Calculator",
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

    app.include_router(calculator_router)
    app.include_router(history_router)
    app.include_router(market_router)
    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "lvcheck.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "development",
    )
