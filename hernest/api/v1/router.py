"""API v1 router configuration."""

from fastapi import APIRouter

from hernest.api.v1.endpoints import (
    appointments,
    auth,
    chat,
    dashboard,
    doctors,
    health,
    health_records,
    period_logs,
    prescriptions,
    profiles,
    session,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["Prescriptions"])
api_router.include_router(
    health_records.router, prefix="/health-records", tags=["Health Records"]
)
api_router.include_router(period_logs.router, prefix="/period-logs", tags=["Period Logs"])
api_router.include_router(chat.router, prefix="/chat", tags=["Assistant"])
