from fastapi import APIRouter

from stylemy.api.endpoints.virtual_tryon import router as virtual_tryon

api_router = APIRouter()

api_router.include_router(virtual_tryon)
