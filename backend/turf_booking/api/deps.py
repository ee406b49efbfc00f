"""
FastAPI dependencies resolving services built at application startup.
"""

from fastapi import Request

from turf_booking.services.admission_service import AdmissionService


def get_admission_service(request: Request) -> AdmissionService:
    return request.app.state.admission_service
