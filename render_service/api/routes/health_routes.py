"""Liveness and readiness endpoints."""
from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Liveness check")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/", summary="Readiness check")
async def root() -> dict:
    return {"status": "ready!"}
