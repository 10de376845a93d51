import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..config.global_config_loader import GlobalConfig
from ..webhooks.handler import WebhookHandler, Launcher
from .routers import webhooks


def create_app(config: GlobalConfig, launcher: Optional[Launcher] = None) -> FastAPI:
    """Create the webhook receiver application for `config`"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logging.info("Starting pages builder webhook server")
        logging.info(f"Serving {len(config.builders)} builders from {config.home}")

        yield

        # Shutdown
        logging.info("Shutting down pages builder webhook server")

    app = FastAPI(
        title="Pages Builder",
        description="Builds and publishes static sites on repository pushes",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.webhook_handler = WebhookHandler(config, launcher)
    app.include_router(webhooks.router)
    return app
