from typing import List, Optional
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
import logging

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import SubscriptionTier
from domain.models import Patient
from domain.schemas.patient_schemas import (
    ConsumeResponse,
    ExpiringSubscription,
    PatientUpsert,
    QuotaStatus,
)
from repositories import PatientRepository

logger = logging.getLogger("quecomi.quota")

LIMIT_REACHED_MESSAGE = (
    "🔒 Has alcanzado el límite de solicitudes gratuitas.\n\n"
    "Para seguir utilizando el bot, actualiza a la versión Premium.\n"
    "Usa el comando /premium para actualizar ahora."
)
LAST_REQUEST_MESSAGE = (
    "⚠️ Esta es tu última solicitud gratuita.\n"
    "Para seguir utilizando el bot, actualiza a Premium.\n"
    "Usa /premium para más información."
)
EXPIRED_MESSAGE = (
    "📢 Tu suscripción Premium ha vencido.\n\n"
    "Has vuelto al plan gratuito con {requests} solicitudes disponibles.\n\n"
    "Para volver a disfrutar de todos los beneficios Premium:\n"
    "✨ Solicitudes ilimitadas\n\n"
    "Usa el comando /premium para renovar tu suscripción."
)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def expiry_notice(days_left: int) -> str:
    return (
        "⚠️ ¡Aviso importante!\n\n"
        f"Tu suscripción Premium vencerá en {days_left} días.\n\n"
        "Para mantener todos tus beneficios Premium:\n"
        "✨ Solicitudes ilimitadas\n\n"
        "Usa el comando /premium para renovar tu suscripción."
    )


class QuotaService:
    """Free-request allowance and subscription tier of each patient"""

    @staticmethod
    def get_patient(db: Session, user_id: int) -> Patient:
        patient = PatientRepository(db).get_by_user_id(user_id)
        if not patient:
            logger.warning(f"patient_not_found user_id={user_id}")
            raise NotFoundError(f"Patient {user_id} not found")
        return patient

    @staticmethod
    def register_patient(db: Session, user_id: int, data: PatientUpsert) -> tuple[Patient, bool]:
        """
        Create a patient on first contact, or update the profile of an existing one.

        New patients start on the FREE tier with the configured allowance.
        Subscription and remaining requests of existing patients are untouched.

        Returns:
            (patient, created_flag)
        """
        if user_id <= 0:
            raise ServiceValidationError("user_id must be a positive integer")

        repo = PatientRepository(db)
        fields = data.model_dump(exclude_unset=True)
        patient = repo.get_by_user_id(user_id)

        if patient:
            patient = repo.update_fields(patient, **fields)
            logger.info(f"patient_updated user_id={user_id} fields={sorted(fields)}")
            return patient, False

        patient = repo.create_patient(user_id, requests=settings.free_requests, **fields)
        logger.info(f"patient_created user_id={user_id} requests={patient.requests}")
        return patient, True

    @staticmethod
    def check_user_requests(db: Session, user_id: int) -> QuotaStatus:
        """Whether the user may send another request; unknown users may not."""
        patient = PatientRepository(db).get_by_user_id(user_id)
        if not patient:
            logger.warning(f"quota_check_unknown_patient user_id={user_id}")
            return QuotaStatus(has_requests=False, is_premium=False)

        if SubscriptionTier(patient.subscription).is_premium:
            return QuotaStatus(has_requests=True, is_premium=True)

        remaining = patient.requests or 0
        return QuotaStatus(
            has_requests=remaining > 0,
            is_premium=False,
            remaining_requests=remaining,
        )

    @staticmethod
    def decrement_user_requests(db: Session, user_id: int) -> bool:
        """
        Use up one request.

        Premium patients are never decremented (returns True). FREE patients
        with requests left lose one (returns True). Otherwise returns False.
        """
        repo = PatientRepository(db)
        patient = repo.get_by_user_id(user_id)
        if not patient:
            return False

        if SubscriptionTier(patient.subscription).is_premium:
            return True

        if (patient.requests or 0) > 0:
            repo.update_fields(patient, requests=patient.requests - 1)
            logger.info(f"request_consumed user_id={user_id} remaining={patient.requests}")
            return True

        return False

    @staticmethod
    def usage_warning(remaining_before: Optional[int]) -> Optional[str]:
        """Warning for a FREE patient given the count before the current request."""
        if remaining_before is None:
            return None
        if remaining_before == 1:
            return LAST_REQUEST_MESSAGE
        if 1 < remaining_before <= settings.low_requests_warning_threshold:
            return (
                f"⚠️ Te quedan {remaining_before - 1} solicitudes gratuitas.\n"
                "Considera actualizar a Premium para disfrutar de solicitudes ilimitadas.\n"
                "Usa /premium para más información."
            )
        return None

    @staticmethod
    def consume(db: Session, user_id: int) -> ConsumeResponse:
        """Check the quota and, when allowed, use one request."""
        status = QuotaService.check_user_requests(db, user_id)
        if not status.has_requests:
            return ConsumeResponse(
                consumed=False, status=status, warning=LIMIT_REACHED_MESSAGE
            )

        consumed = QuotaService.decrement_user_requests(db, user_id)
        warning = None
        if consumed and not status.is_premium:
            warning = QuotaService.usage_warning(status.remaining_requests)
        return ConsumeResponse(
            consumed=consumed,
            status=QuotaService.check_user_requests(db, user_id),
            warning=warning,
        )

    @staticmethod
    def update_subscription(
        db: Session, user_id: int, tier: SubscriptionTier
    ) -> Patient:
        """
        Move a patient to another tier.

        Starting a premium tier records the start time. Going back to FREE
        restores the configured allowance.
        """
        patient = QuotaService.get_patient(db, user_id)
        tier = SubscriptionTier(tier)
        fields = {"subscription": tier}
        if tier.is_premium:
            fields["subscription_started_at"] = datetime.now(timezone.utc)
        else:
            fields["subscription_started_at"] = None
            fields["requests"] = settings.free_requests

        patient = PatientRepository(db).update_fields(patient, **fields)
        logger.info(f"subscription_updated user_id={user_id} tier={tier.value}")
        return patient

    @staticmethod
    def reset_free_user_requests(db: Session, requests: Optional[int] = None) -> int:
        """Monthly reset of every FREE patient's allowance. Returns patients updated."""
        allowance = settings.free_requests if requests is None else requests
        if allowance < 0:
            raise ServiceValidationError("requests must be >= 0")

        count = PatientRepository(db).set_requests_for_tier(
            SubscriptionTier.FREE, allowance
        )
        logger.info(f"free_requests_reset patients={count} requests={allowance}")
        return count

    @staticmethod
    def find_expiring(
        db: Session, now: Optional[datetime] = None, days_before: Optional[int] = None
    ) -> List[ExpiringSubscription]:
        """
        Premium patients whose period ends within ``days_before`` days of ``now``.

        Already expired subscriptions are left to expire_subscriptions.
        """
        now = _as_utc(now or datetime.now(timezone.utc))
        if days_before is None:
            days_before = settings.subscription_warning_days
        period = timedelta(days=settings.subscription_days)
        cutoff = now - period + timedelta(days=days_before)

        expiring = []
        for patient in PatientRepository(db).get_premium_started_before(cutoff):
            started_at = _as_utc(patient.subscription_started_at)
            expires_at = started_at + period
            if expires_at <= now:
                continue
            days_left = settings.subscription_days - (now - started_at).days
            expiring.append(
                ExpiringSubscription(
                    user_id=patient.user_id,
                    tier=patient.subscription,
                    started_at=started_at,
                    expires_at=expires_at,
                    days_left=days_left,
                    message=expiry_notice(days_left),
                )
            )

        logger.info(f"expiring_subscriptions found={len(expiring)} days_before={days_before}")
        return expiring

    @staticmethod
    def expire_subscriptions(db: Session, now: Optional[datetime] = None) -> int:
        """Move premium patients whose period has ended back to FREE. Returns patients moved."""
        now = _as_utc(now or datetime.now(timezone.utc))
        cutoff = now - timedelta(days=settings.subscription_days)

        repo = PatientRepository(db)
        expired = repo.get_premium_started_before(cutoff)
        for patient in expired:
            repo.update_fields(
                patient,
                subscription=SubscriptionTier.FREE,
                requests=settings.free_requests,
                subscription_started_at=None,
            )
            logger.info(f"subscription_expired user_id={patient.user_id}")

        return len(expired)
