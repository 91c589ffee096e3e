"""
Repository tests against the in-memory SQLite store.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from test_fixtures import TELEGRAM_USER_ID, db_session
from app.exceptions import ServiceValidationError
from domain.enums import SubscriptionTier
from domain.schemas.meal_schemas import MealRecord
from repositories import MealRepository, PatientRepository


def record(description, kcal="100"):
    return MealRecord(
        description=description,
        kcal=Decimal(kcal),
        protein=Decimal("1"),
        fat=Decimal("1"),
        carbohydrates=Decimal("1"),
    )


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# MEAL REPOSITORY
# =============================================================================


def test_add_records_inserts_one_row_per_record(db_session: Session):
    repo = MealRepository(db_session)
    entries = repo.add_records(
        TELEGRAM_USER_ID, [record("Mate"), record("Bizcochitos", "180")], utc(2024, 5, 10, 12)
    )

    assert len(entries) == 2
    assert repo.get_by_id(entries[1].meal_id).description == "Bizcochitos"
    assert repo.get_by_id(entries[1].meal_id).kcal == Decimal("180")
    assert repo.exists(entries[0].meal_id)


def test_add_records_with_nothing_to_store(db_session: Session):
    assert MealRepository(db_session).add_records(TELEGRAM_USER_ID, [], utc(2024, 5, 10)) == []


def test_get_by_user_between_is_half_open_and_ordered(db_session: Session):
    repo = MealRepository(db_session)
    repo.add_records(TELEGRAM_USER_ID, [record("cena")], utc(2024, 5, 10, 22))
    repo.add_records(TELEGRAM_USER_ID, [record("inicio")], utc(2024, 5, 10, 3))
    repo.add_records(TELEGRAM_USER_ID, [record("fin")], utc(2024, 5, 11, 3))
    repo.add_records(TELEGRAM_USER_ID, [record("antes")], utc(2024, 5, 10, 2, 59))
    repo.add_records(555, [record("otro usuario")], utc(2024, 5, 10, 12))

    meals = repo.get_by_user_between(TELEGRAM_USER_ID, utc(2024, 5, 10, 3), utc(2024, 5, 11, 3))

    assert [m.description for m in meals] == ["inicio", "cena"]


def test_delete_meal(db_session: Session):
    repo = MealRepository(db_session)
    entry = repo.add_records(TELEGRAM_USER_ID, [record("Mate")], utc(2024, 5, 10))[0]

    assert repo.delete(entry.meal_id)
    assert not repo.delete(entry.meal_id)
    assert repo.get_by_id(entry.meal_id) is None


# =============================================================================
# PATIENT REPOSITORY
# =============================================================================


def test_create_and_get_patient(db_session: Session):
    repo = PatientRepository(db_session)
    repo.create_patient(TELEGRAM_USER_ID, requests=20, name="Lucía", age=34)

    patient = repo.get_by_user_id(TELEGRAM_USER_ID)
    assert patient.subscription == SubscriptionTier.FREE
    assert patient.requests == 20
    assert patient.age == 34
    assert repo.get_by_user_id(1) is None


def test_create_duplicate_patient(db_session: Session):
    repo = PatientRepository(db_session)
    repo.create_patient(TELEGRAM_USER_ID, requests=20)
    db_session.expunge_all()

    with pytest.raises(ServiceValidationError):
        repo.create_patient(TELEGRAM_USER_ID, requests=20)


def test_subscription_queries_and_bulk_reset(db_session: Session):
    repo = PatientRepository(db_session)
    repo.create_patient(1, requests=0)
    repo.create_patient(2, requests=3)
    premium = repo.create_patient(3, requests=0)
    repo.update_fields(premium, subscription=SubscriptionTier.PRO)

    assert {p.user_id for p in repo.get_by_subscription(SubscriptionTier.FREE)} == {1, 2}

    assert repo.set_requests_for_tier(SubscriptionTier.FREE, 20) == 2
    assert repo.get_by_user_id(1).requests == 20
    assert repo.get_by_user_id(3).requests == 0
