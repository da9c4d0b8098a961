# crowdreport/main.py
from __future__ import annotations

import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import RedirectResponse

from crowdreport.config import load_settings
from crowdreport.errors import DuplicateVote, InvalidTransition, NotFound, ReportingError, ValidationError
from crowdreport.routes.alerts import router as alerts_router
from crowdreport.routes.analytics import router as analytics_router
from crowdreport.routes.campaigns import router as campaigns_router
from crowdreport.routes.reporters import router as reporters_router
from crowdreport.routes.reports import router as reports_router
from crowdreport.routes.trends import router as trends_router

log = logging.getLogger("uvicorn.error")

LOCAL_ORIGINS = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _api_prefix() -> str:
    """API_PREFIX normalized to "/x" form, or "" when unset."""
    raw = os.getenv("API_PREFIX", "").strip().strip("/")
    return f"/{raw}" if raw else ""


def _cors_settings() -> dict:
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    settings = dict(allow_methods=["*"], allow_headers=["*"], allow_credentials=True)
    if origins:
        settings["allow_origins"] = origins
    else:
        settings["allow_origin_regex"] = LOCAL_ORIGINS
    return settings


_API_PREFIX = _api_prefix()

app = FastAPI(
    title="CrowdReport API",
    version="1.0.0",
    description="Crowdsourced incident reporting: submission, verification, trends and alerts.",
)

# ---------------- CORS ----------------
cors_kwargs = _cors_settings()
app.add_middleware(CORSMiddleware, **cors_kwargs)
log.info("CORS configured: %s", cors_kwargs)

# ---------------- Errors ----------------
_STATUS_BY_ERROR = (
    (NotFound, 404),
    (DuplicateVote, 409),
    (InvalidTransition, 409),
    (ValidationError, 422),
)


@app.exception_handler(ReportingError)
def reporting_error_handler(request: Request, exc: ReportingError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
    if status >= 409:
        log.warning("%s %s -> %d %s", request.method, request.url.path, status, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


# ---------------- Routers ----------------
# Each router carries its own prefix (/reports, /trends, ...); _API_PREFIX goes in front.
for router in (reports_router, reporters_router, trends_router, alerts_router, campaigns_router, analytics_router):
    app.include_router(router, prefix=_API_PREFIX)


# ---------------- Meta/utility ----------------
@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    # Visiting the root opens Swagger UI
    return RedirectResponse(url="/docs")


@app.get(f"{_API_PREFIX or ''}/health", tags=["meta"])
def health():
    return {"status": "ok", "prefix": _API_PREFIX or "", "store": load_settings().store_backend}


# ---------------- Local dev entrypoint ----------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "crowdreport.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
