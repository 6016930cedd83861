"""FastAPI application entrypoint. No business logic; only wiring."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI

from vulnreport import __version__
from vulnreport.api.v1 import router as v1_router
from vulnreport.core.config import settings

app = FastAPI(
    title="Vulnreport API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Vulnreport API"}
