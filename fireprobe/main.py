"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, CORS, routers and the console
page. The Console (session, log, operators) is created here and stored
on app.state; there is no other process-wide state.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from fireprobe.api.v1 import api_router
from fireprobe.application.interfaces import IBackendSDK
from fireprobe.core.config import get_settings
from fireprobe.core.console import Console
from fireprobe.core.exception_handlers import register_exception_handlers
from fireprobe.core.lifespan import create_lifespan
from fireprobe.infrastructure.firebase import FirebaseRESTSDK
from fireprobe.pages import render_root_page


def create_app(sdk: IBackendSDK | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        sdk: Backend SDK entry point; defaults to the Firebase REST SDK.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.console = Console(settings, sdk if sdk is not None else FirebaseRESTSDK(settings))

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", response_class=HTMLResponse)
    def root() -> HTMLResponse:
        """The console page."""
        return HTMLResponse(content=render_root_page(settings.app_name, settings.mfa_anchor_id))

    return app


app = create_app()
