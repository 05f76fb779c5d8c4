import logging

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from alumni_app.config import settings
from alumni_app.routers import (
    admin_members,
    admin_users,
    auth,
    members,
    profile,
)
from alumni_app.utils.response import (
    create_response,
    handle_exception,
    http_exception_handler,
    validation_exception_handler,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.PROJECT_NAME)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Add routes
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(members.router)
app.include_router(admin_members.router)
app.include_router(admin_users.router)


@app.get("/")
def home():
    try:
        return create_response(
            message="Alumni API running",
            data={"service": "alumni-backend"},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@app.get("/api-info")
def api_info():
    return create_response(
        message="API information",
        data={"service": settings.PROJECT_NAME, "docs_url": app.docs_url},
        status_code=status.HTTP_200_OK,
    )
