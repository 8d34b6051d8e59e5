from datetime import datetime

from fastapi import APIRouter, Depends

from signed_assets.core.config import Settings, get_settings

router = APIRouter()


@router.get("/healthz")
def healthz(settings: Settings = Depends(get_settings)):
    config = settings.rewrite_config()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "env": settings.ENV,
        "rewrite_enabled": config.is_active,
        "missing": list(config.missing_fields()),
        "timestamp": datetime.utcnow().isoformat(),
    }
