"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from pdfchat.api.v1 import chat, documents

api_router = APIRouter()

api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(chat.router, prefix="/documents", tags=["chat"])
