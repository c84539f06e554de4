from fastapi import APIRouter

from app.api.routes import weather

api_router = APIRouter(prefix="/api")
api_router.include_router(weather.router, tags=["weather"])
