"""FastAPI application entry point."""

from fastapi import FastAPI

from .. import __version__
from .routes import preview

app = FastAPI(
    title="CRM Migration API",
    description="Preview Zoho CRM to Twenty mappings",
    version=__version__,
)

app.include_router(preview.router, prefix="/api", tags=["preview"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
