from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from string_analyzer.api.routes import router
from string_analyzer.config import Settings, get_settings
from string_analyzer.exceptions import StringAnalyzerError
from string_analyzer.storage import build_storage

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Initializing storage (mode={settings.storage_backend})...")
        app.state.storage = build_storage(settings)
        logger.info(f"Storage initialized: {app.state.storage.name}")
        yield

    app = FastAPI(
        title="String Analyzer Service",
        description="Analyze strings and query stored results, including by natural language",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, tags=["strings"])

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "String Analyzer Service",
            "version": "1.0.0",
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/filter-by-natural-language": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string",
                "GET /docs": "API documentation",
            },
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        storage = request.app.state.storage
        return {"status": "healthy", "storage": storage.name, "count": storage.count()}

    register_exception_handlers(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StringAnalyzerError)
    async def string_analyzer_exception_handler(request: Request, exc: StringAnalyzerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = {}
        status_code = status.HTTP_400_BAD_REQUEST
        for error in exc.errors():
            field = error["loc"][-1]
            errors[field] = error["msg"]
            # A present but non-string "value" is a type problem, not a malformed request
            if field == "value" and error["type"] == "string_type":
                status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

        message = "Value must be a string" if status_code == 422 else "Invalid request"
        return JSONResponse(
            status_code=status_code,
            content={"error": message, "details": errors},
        )

    # HTTPException handler
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("string_analyzer.main:app", host="0.0.0.0", port=get_settings().port, reload=True)
