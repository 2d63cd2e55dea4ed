# app/api/deps.py

from fastapi import Request

from app.db.store import InvoiceStore


def get_store(request: Request) -> InvoiceStore:
    # One store per application instance, created in create_app()
    return request.app.state.store
