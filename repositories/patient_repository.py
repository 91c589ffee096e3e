"""
Patient Repository - Data access layer for bot users and their quota
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import Patient
from domain.enums import SubscriptionTier
from app.exceptions import ServiceValidationError


class PatientRepository(BaseRepository[Patient]):
    """Repository for patient data access"""

    def __init__(self, db: Session):
        super().__init__(db, Patient)

    def get_by_user_id(self, user_id: int) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.user_id == user_id).first()

    def create_patient(self, user_id: int, requests: int, **fields) -> Patient:
        """Create a FREE patient with the given request allowance"""
        patient = Patient(
            user_id=user_id,
            subscription=SubscriptionTier.FREE,
            requests=requests,
            **fields,
        )
        try:
            self.db.add(patient)
            self.db.commit()
            self.db.refresh(patient)
            return patient
        except IntegrityError:
            self.db.rollback()
            raise ServiceValidationError(f"Patient {user_id} already exists")

    def update_fields(self, patient: Patient, **fields) -> Patient:
        """Set the given attributes and commit"""
        for key, value in fields.items():
            if hasattr(patient, key):
                setattr(patient, key, value)
        return self.update(patient)

    def get_by_subscription(self, tier: SubscriptionTier) -> List[Patient]:
        return self.db.query(Patient).filter(Patient.subscription == tier).all()

    def set_requests_for_tier(self, tier: SubscriptionTier, requests: int) -> int:
        """Bulk-set the remaining requests of every patient on a tier"""
        # the commit below expires loaded patients, so no in-session sync
        count = (
            self.db.query(Patient)
            .filter(Patient.subscription == tier)
            .update({Patient.requests: requests}, synchronize_session=False)
        )
        self.db.commit()
        return count

    def get_premium_started_before(self, cutoff: datetime) -> List[Patient]:
        """PRO/MEDICAL patients whose subscription started at or before cutoff"""
        return (
            self.db.query(Patient)
            .filter(
                Patient.subscription.in_(
                    [SubscriptionTier.PRO, SubscriptionTier.MEDICAL]
                ),
                Patient.subscription_started_at.isnot(None),
                Patient.subscription_started_at <= cutoff,
            )
            .order_by(Patient.subscription_started_at.asc())
            .all()
        )
