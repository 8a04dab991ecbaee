import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .article_pipeline import ArticlePipeline
from .auth import check_credentials, issue_token, verify_token
from .config import (
    AUTH_COOKIE_NAME,
    FONT_SIZE_DEFAULT,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    FONT_SIZE_STEP,
    Settings,
)
from .errors import AuthError, InternalError, ReaderError, UpstreamFailure, ValidationError
from .http_client import Fetcher

logger = logging.getLogger("readerview.api")

GENERIC_ERROR = "Failed to fetch and parse URL"


class IngestRequest(BaseModel):
    url: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _upstream_status(exc: UpstreamFailure) -> int:
    # Non-error upstream codes (e.g. 304) cannot be mirrored as failures
    return exc.status if 400 <= exc.status <= 599 else 502


def create_app(settings: Optional[Settings] = None, pipeline: Optional[ArticlePipeline] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    pipeline = pipeline or ArticlePipeline(fetcher=Fetcher(settings))

    app = FastAPI(title="Reader")
    app.state.settings = settings
    app.state.pipeline = pipeline

    @app.exception_handler(UpstreamFailure)
    async def handle_upstream(_request: Request, exc: UpstreamFailure):
        return error_response(_upstream_status(exc), f"Failed to fetch URL: {exc.reason}")

    @app.exception_handler(InternalError)
    async def handle_internal(_request: Request, exc: InternalError):
        return error_response(500, GENERIC_ERROR)

    @app.exception_handler(ReaderError)
    async def handle_reader_error(_request: Request, exc: ReaderError):
        return error_response(exc.status_code, str(exc) or "Request failed")

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(_request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request body")

    def require_session(request: Request) -> None:
        if not settings.require_auth:
            return
        token = request.cookies.get(AUTH_COOKIE_NAME)
        if not verify_token(token, settings.token_secret, settings.token_max_age):
            raise AuthError("Unauthorized")

    @app.post("/auth/login")
    def login(payload: LoginRequest):
        if not payload.username or not payload.password:
            raise ValidationError("Username and password are required")
        if not check_credentials(payload.username, payload.password, settings):
            logger.info("Failed login for %r", payload.username)
            raise AuthError("Invalid username or password")
        response = JSONResponse(content={"success": True})
        response.set_cookie(
            AUTH_COOKIE_NAME,
            issue_token(settings.token_secret),
            max_age=settings.token_max_age,
            httponly=True,
            secure=settings.secure_cookies,
            samesite="lax",
            path="/",
        )
        return response

    # Sync handlers run in the threadpool, so a slow fetch does not block other requests
    @app.post("/ingest", dependencies=[Depends(require_session)])
    def ingest(payload: IngestRequest):
        if not payload.url or not payload.url.strip():
            raise ValidationError("URL is required")
        try:
            record = pipeline.ingest(payload.url)
        except ReaderError:
            raise
        except Exception as exc:
            logger.exception("Error ingesting %s", payload.url)
            raise InternalError(GENERIC_ERROR) from exc
        return {"id": record.id, "title": record.title}

    @app.get("/content", dependencies=[Depends(require_session)])
    def content(article_id: Optional[str] = Query(default=None, alias="id")):
        if not article_id:
            raise ValidationError("ID is required")
        try:
            rendered = pipeline.render(article_id)
        except ReaderError:
            raise
        except Exception as exc:
            logger.exception("Error rendering %s", article_id)
            raise InternalError(GENERIC_ERROR) from exc
        return rendered.to_dict()

    @app.get("/preferences")
    def preferences():
        return {
            "font_size": {
                "default": FONT_SIZE_DEFAULT,
                "min": FONT_SIZE_MIN,
                "max": FONT_SIZE_MAX,
                "step": FONT_SIZE_STEP,
            }
        }

    return app
