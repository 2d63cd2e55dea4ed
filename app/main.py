import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI

from app.api.invoices import router as invoices_router
from app.api.reports import router as reports_router
from app.api.rms import router as rms_router
from app.config import MOCK_RMS, SEED_MOCK_RMS
from app.db.store import InvoiceStore
from app.models.rms import RMCreate

logger = logging.getLogger(__name__)


def create_app(
    seed_mock_rms: bool = SEED_MOCK_RMS,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    app = FastAPI(
        title="Invoice RM Assignment API",
        version="0.1.0",
    )

    store = InvoiceStore(clock=clock)
    if seed_mock_rms:
        for rm in MOCK_RMS:
            store.add_rm(RMCreate(**rm))
        logger.info("Seeded %s mock relationship managers", len(MOCK_RMS))
    app.state.store = store

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(invoices_router)
    app.include_router(rms_router)
    app.include_router(reports_router)
    return app


app = create_app()
