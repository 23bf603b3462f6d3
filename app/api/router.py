from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.users import router as users_router
from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.workouts import router as workouts_router
from app.api.v1.workout_sessions import router as workout_sessions_router
from app.api.v1.exercises import router as exercises_router
from app.api.v1.sections import router as sections_router
from app.api.v1.metrics import router as metrics_router
from app.api.v1.social import router as social_router
from app.api.v1.admin import router as admin_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(workout_sessions_router, prefix="/workout-sessions", tags=["workout-sessions"])
api_router.include_router(exercises_router, prefix="/exercises", tags=["exercises"])
api_router.include_router(sections_router, prefix="/sections", tags=["sections"])
api_router.include_router(metrics_router, prefix="/metrics", tags=["metrics"])
api_router.include_router(social_router, prefix="/social", tags=["social"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
