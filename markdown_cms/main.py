from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from .config import settings
from .logging_config import configure_logging
from .routers import files, git, repositories

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

_SECURITY_HEADERS = {
    'X-Frame-Options': 'DENY',
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}

_SAFE_API_ERROR = {'detail': 'Internal server error. Please try again.'}
_SAFE_HTML_ERROR = '<!doctype html><title>Error</title><h1>Unexpected error</h1><p>Please try again.</p>'


def _parse_cors_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


cors_origins = _parse_cors_origins(settings.cors_origins)
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type'],
    )


def _apply_security_headers(response):
    for key, value in _SECURITY_HEADERS.items():
        response.headers[key] = value
    return response


@app.middleware('http')
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    return _apply_security_headers(response)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    if request.url.path.startswith('/api/'):
        response = JSONResponse(_SAFE_API_ERROR, status_code=500)
    else:
        response = HTMLResponse(_SAFE_HTML_ERROR, status_code=500)
    return _apply_security_headers(response)


@app.on_event('startup')
def startup():
    configure_logging(settings.log_level)
    if settings.use_mock_api:
        Path(settings.mock_root_dir).mkdir(parents=True, exist_ok=True)
        logger.info('Mock mode: serving %s', settings.mock_root_dir)


@app.get('/healthz')
def healthz():
    return {'ok': True}


app.include_router(files.router)
app.include_router(repositories.router)
app.include_router(git.router)
