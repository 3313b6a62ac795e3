from fastapi import APIRouter

from app.services.supabase_client import is_configured

router = APIRouter()


@router.get(
    "/",
    summary="Health check",
    description="Liveness probe; reports whether Supabase credentials are configured.",
)
async def health_check():
    return {
        "status": "ok",
        "supabase": "configured" if is_configured() else "not_configured",
    }
