"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from hrms.api.v1.endpoints import (auth, clock, employees, leave, settings,
                                   shifts, system)

api_router = APIRouter()

# Auth (login, refresh, user management)
api_router.include_router(auth.router)

# Employee directory
api_router.include_router(employees.router)

# Rota and the clock
api_router.include_router(shifts.router)
api_router.include_router(clock.router)
api_router.include_router(leave.router)

# Attendance policy, health
api_router.include_router(settings.router)
api_router.include_router(system.router)
