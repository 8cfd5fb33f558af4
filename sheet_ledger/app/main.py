import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.exceptions import register_exception_handlers
from .api.routes import debug_router, router as transactions_router
from .core.config import get_settings
from .core.dependencies import get_sheet_store
from .services.codec import isoformat_millis

settings = get_settings()
logging.basicConfig(level=settings.log_level)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Only close the client if a request actually created it
    if get_sheet_store.cache_info().currsize:
        await get_sheet_store().close()
        get_sheet_store.cache_clear()

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(transactions_router)
app.include_router(debug_router)
register_exception_handlers(app)

@app.get("/health")
def read_health() -> dict[str, str]:
    return {"status": "ok", "timestamp": isoformat_millis(datetime.now(UTC))}

def run() -> None:
    logging.getLogger(__name__).info("%s listening on port %d", settings.app_name, settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
