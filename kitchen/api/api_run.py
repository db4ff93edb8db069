from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kitchen.infra.Document_Store import DocumentStore
from kitchen.utilities import config
from kitchen.utilities.errors import NotFoundError, UpstreamFailure, ValidationFailure

# Routers
from kitchen.api.api_ai import router as ai_router
from kitchen.api.routes import meal_plans, recipes, shopping_lists

# Logging
logger = logging.getLogger("kitchen_app")


def _error_handler(status_code: int):
    async def handler(request: Request, exc):
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc.message)
        return JSONResponse(status_code=status_code, content={"detail": exc.message})
    return handler


def create_app(data_dir: Optional[str] = None) -> FastAPI:
    """Build the API application; the document store lives in data_dir (DATA_DIR by default)."""
    store_dir = data_dir or config.DATA_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = DocumentStore(store_dir).open()
        try:
            yield
        finally:
            app.state.store.close()

    app = FastAPI(title="Kitchen Buddy API", debug=config.DEBUG, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, _error_handler(404))
    app.add_exception_handler(ValidationFailure, _error_handler(400))
    app.add_exception_handler(UpstreamFailure, _error_handler(502))

    @app.get("/api/health")
    def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    # AI routes first so /generate and /analyze-image are not taken for recipe ids
    app.include_router(ai_router)
    app.include_router(recipes.router)
    app.include_router(meal_plans.router)
    app.include_router(shopping_lists.router)
    return app


app = create_app()
