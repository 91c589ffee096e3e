"""Patient registration, quota and subscription routes"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db
from domain.schemas.patient_schemas import (
    ConsumeResponse,
    PatientResponse,
    PatientUpsert,
    QuotaStatus,
    SubscriptionUpdate,
)
from services.quota_service import QuotaService

router = APIRouter(prefix="/patients", tags=["Patients"])
logger = logging.getLogger("quecomi.api.patients")


@router.put("/{user_id}", response_model=PatientResponse)
def upsert_patient(
    user_id: int,
    data: PatientUpsert,
    response: Response,
    db: Session = Depends(get_db),
):
    """Register a patient, or update the profile of an existing one."""
    patient, created = QuotaService.register_patient(db, user_id, data)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return PatientResponse.model_validate(patient)


@router.get("/{user_id}/quota", response_model=QuotaStatus)
def get_quota(user_id: int, db: Session = Depends(get_db)):
    return QuotaService.check_user_requests(db, user_id)


@router.post("/{user_id}/quota/consume", response_model=ConsumeResponse)
def consume_request(user_id: int, db: Session = Depends(get_db)):
    """Use one request if the patient still has any; includes the warning to show."""
    return QuotaService.consume(db, user_id)


@router.put("/{user_id}/subscription", response_model=PatientResponse)
def update_subscription(
    user_id: int, data: SubscriptionUpdate, db: Session = Depends(get_db)
):
    patient = QuotaService.update_subscription(db, user_id, data.tier)
    return PatientResponse.model_validate(patient)
