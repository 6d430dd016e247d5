from fastapi import APIRouter

from src.auth.router import router as auth_router
from src.webapp.verify.router import router as verify_webapp_router
from src.attendance.router import router as attendance_router


api_router = APIRouter()

# /api/register, /api/login
api_router.include_router(
    auth_router,
    tags=["Auth"]
)

# /api/verify-webapp
api_router.include_router(
    verify_webapp_router,
    prefix="/verify-webapp",
    tags=["Web App"]
)

# /api/attendance
api_router.include_router(
    attendance_router,
    prefix="/attendance",
    tags=["Attendance"]
)
