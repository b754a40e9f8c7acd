"""Health check endpoint."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends

from bhraman.models import BhramanError
from bhraman.services.dynamodb import DatabasePool
from bhraman_api.dependencies import get_db_pool

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Service health",
    description="""
Report service health including database connectivity.

**Public endpoint** - no authentication required.

Always answers 200; `database` is `unavailable` while the connection
pool is failing or cooling down.
""",
)
def health(pool: DatabasePool = Depends(get_db_pool)) -> dict[str, Any]:
    try:
        pool.connect()
        database = "connected"
    except BhramanError:
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
        "timestamp": datetime.now(UTC).isoformat(),
    }
