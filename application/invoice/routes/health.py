from fastapi import APIRouter
from fastapi.responses import JSONResponse

from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

router = APIRouter()


@router.get("/health")
async def health_check():

    details = {
        "status": "healthy",
        "version": configs.APP_VERSION,
        "service": f"{configs.APP_NAME}-service",
        "profiles": configs.APPLICATION_PROFILES,
    }
    return JSONResponse(content=details)
