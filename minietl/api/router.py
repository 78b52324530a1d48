from fastapi import APIRouter

from minietl.api.etl import router as etl_router

api_router = APIRouter()

# API routes at /api/*
api_router.include_router(etl_router, prefix="/api", tags=["etl"])
