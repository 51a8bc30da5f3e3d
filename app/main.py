"""FastAPI application setup for the air-quality dashboard service."""

from fastapi import FastAPI

from .api import router as api_router
from .config import settings

app = FastAPI(title="Air Quality Dashboard")


@app.get("/")
def service_info():
    """Describe the service and where its API lives."""
    return {
        "service": app.title,
        "api_prefix": "/v1",
        "data_source": settings.data_source,
    }


# API routes
app.include_router(api_router, prefix="/v1")
