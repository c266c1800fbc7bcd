from fastapi import APIRouter, Request
from dexstats.api import stats

router = APIRouter()

router.include_router(stats.router, prefix="/stats", tags=["stats"])


@router.get("/health")
def health(request: Request):
    db_ok = request.app.state.database.ping()
    return {"status": "ok" if db_ok else "degraded", "database": db_ok}
