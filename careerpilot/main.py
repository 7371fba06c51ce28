import logging

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from careerpilot.api.v1.analytics import router as analytics_router
from careerpilot.api.v1.cover_letters import router as cover_letters_router
from careerpilot.api.v1.health import router as health_router
from careerpilot.api.v1.jobs import router as jobs_router
from careerpilot.api.v1.resumes import router as resumes_router
from careerpilot.api.v1.usage import router as usage_router
from careerpilot.core.config import settings
from careerpilot.core.cors import cors_allowed_origins
from careerpilot.core.lifespan import lifespan
from careerpilot.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="CareerPilot API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resumes_router, prefix="/v1", tags=["Resumes"])
app.include_router(jobs_router, prefix="/v1", tags=["Jobs"])
app.include_router(cover_letters_router, prefix="/v1", tags=["Cover Letters"])
app.include_router(usage_router, prefix="/v1", tags=["Usage"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
