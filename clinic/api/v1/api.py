from fastapi import APIRouter
from clinic.api.v1.auth import routes as auth
from clinic.api.v1.appointments import routes as appointments
from clinic.api.v1.profiles import routes as profiles

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profiles.router, tags=["profiles"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
