from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import os
import logging

from app.config import settings
from app.exceptions import PortalError

# Enable logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Init app
app = FastAPI(
    title="Challenge Application Portal",
    description="AYuTe Africa Challenge Nigeria - application form, verification and admin review API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600
)

# Uploaded documents
UPLOAD_DIR = os.path.abspath(settings.UPLOAD_DIR)
os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")
logger.info(f"Uploads served at /uploads from {UPLOAD_DIR}")


# Error handlers
@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.setdefault(".".join(loc) or "payload", []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


# Route Registrations
from app.routes import routers

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix or '/'}")


@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "Welcome to the AYuTe Africa Challenge Nigeria application portal API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": [
            "/api/application/* - Application form and applicant session",
            "/verify-email - Email verification",
            "/api/admin/* - Admin authentication, dashboard and export",
            "/health - System health check"
        ]
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Challenge Application Portal starting up...")
    logger.info(f"CORS enabled for origins: {settings.CORS_ORIGINS}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Challenge Application Portal shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
