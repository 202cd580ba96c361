# coe_portal/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Your configuration and DB
from coe_portal.config import settings
from coe_portal.core.db import init_db, close_db
from coe_portal.core.errors import PortalError
from coe_portal.core.logging_config import setup_logging

from coe_portal.api.v1.routers import auth, admin, blog_posts, staff, media

from coe_portal.core.bootstrap import ensure_default_admin

setup_logging()
logger = logging.getLogger("coe_portal")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.code, "message": exc.message},
    )


@app.on_event("startup")
async def on_startup():
    logger.info("Starting %s (env=%s, media=%s)", settings.APP_NAME, settings.env, settings.media_backend)
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(blog_posts.router, prefix="/api/v1")
app.include_router(staff.router, prefix="/api/v1")
app.include_router(media.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")

# Locally stored media (MEDIA_BACKEND=local)
if settings.media_backend == "local":
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.get("/healthz")
def healthz():
    return {"ok": True}
