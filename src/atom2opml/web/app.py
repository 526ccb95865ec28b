# ABOUTME: FastAPI application factory with Jinja2 templates.
# ABOUTME: Thin upload/URL front end around the Atom to OPML converter.

from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

logger = structlog.get_logger()

WEB_DIR = Path(__file__).parent
TEMPLATES_DIR = WEB_DIR / "templates"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="atom2opml",
        description="Convert an Atom feed into an OPML 1.0 subscription file",
        version="0.1.0",
    )

    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    from atom2opml.web.routes import router

    app.include_router(router)
    logger.debug("app_created")

    return app


app = create_app()
