"""
HTTP tests: routes with stubbed services, plus end-to-end flows on SQLite.
"""

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from test_fixtures import (
    APOLOGY_REPLY,
    TELEGRAM_USER_ID,
    TWO_DISH_REPLY,
    client,
    db_session,
    make_meal_entry,
    make_patient,
)
from main import app
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import SubscriptionTier
from domain.schemas.meal_schemas import DailySummary, NutritionTotals
from domain.schemas.patient_schemas import QuotaStatus
from services.meal_logging_service import MealLoggingService
from services.quota_service import QuotaService
from services.summary_service import SummaryService


def test_health_check():
    r = client.get("/health-check")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "QueComi"}
    assert r.headers["X-Request-ID"]
    assert "X-Process-Time" in r.headers


def test_database_health_check():
    r = client.get("/health-check/db")
    assert r.status_code == 200
    assert r.json()["database"] == "reachable"


# =============================================================================
# MEALS (stubbed services)
# =============================================================================


def test_parse_reply():
    r = client.post("/meals/parse", json={"text": TWO_DISH_REPLY})
    assert r.status_code == 200

    body = r.json()
    assert body["fragments"] == 2
    assert [rec["description"] for rec in body["records"]] == [
        "Café con leche",
        "Tostadas con manteca",
    ]
    assert Decimal(body["records"][0]["kcal"]) == Decimal("120")
    assert body["skipped_as_error"] is False


def test_parse_error_reply():
    r = client.post("/meals/parse", json={"text": APOLOGY_REPLY})
    assert r.status_code == 200
    assert r.json() == {"fragments": 0, "records": [], "skipped_as_error": True}


def test_parse_requires_text():
    r = client.post("/meals/parse", json={})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


def test_log_meals(monkeypatch):
    calls = {}

    def fake_log(db, user_id, text):
        calls["args"] = (user_id, text)
        return [make_meal_entry(meal_id=7, user_id=user_id)]

    monkeypatch.setattr(MealLoggingService, "log_response", fake_log)

    r = client.post(f"/users/{TELEGRAM_USER_ID}/meals", json={"text": "hola"})
    assert r.status_code == 201
    assert calls["args"] == (TELEGRAM_USER_ID, "hola")
    assert r.json()[0]["meal_id"] == 7
    assert r.json()[0]["description"] == "Milanesa con puré"


def test_log_meals_invalid_user():
    r = client.post("/users/-5/meals", json={"text": TWO_DISH_REPLY})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "SERVICE_VALIDATION_ERROR"


def test_daily_summary_route(monkeypatch):
    summary = DailySummary(
        user_id=TELEGRAM_USER_ID,
        day=date(2024, 5, 10),
        timezone="America/Argentina/Buenos_Aires",
        entries=[],
        totals=NutritionTotals(),
        text="No has registrado comidas hoy.",
    )
    monkeypatch.setattr(
        SummaryService, "get_daily_summary", lambda db, user_id, now=None: summary
    )

    r = client.get(f"/users/{TELEGRAM_USER_ID}/meals/summary")
    assert r.status_code == 200
    assert r.json()["day"] == "2024-05-10"
    assert r.json()["text"] == "No has registrado comidas hoy."


def test_delete_meal_not_found(monkeypatch):
    def fake_delete(db, meal_id):
        raise NotFoundError(f"Meal {meal_id} not found")

    monkeypatch.setattr(MealLoggingService, "delete_meal", fake_delete)

    r = client.delete("/meals/99")
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "NOT_FOUND", "message": "Meal 99 not found"}


def test_unexpected_error_returns_500(monkeypatch):
    def boom(db, user_id, now=None):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(SummaryService, "get_daily_summary", boom)

    safe_client = TestClient(app, raise_server_exceptions=False)
    r = safe_client.get(f"/users/{TELEGRAM_USER_ID}/meals/summary")
    assert r.status_code == 500
    assert r.json()["error"]["code"] == "INTERNAL_SERVER_ERROR"


# =============================================================================
# PATIENTS (stubbed services)
# =============================================================================


def test_upsert_patient_created_and_updated(monkeypatch):
    patient = make_patient()
    results = iter([(patient, True), (patient, False)])
    monkeypatch.setattr(QuotaService, "register_patient", lambda db, uid, data: next(results))

    payload = {"name": "Lucía Fernández", "age": 34}
    assert client.put(f"/patients/{TELEGRAM_USER_ID}", json=payload).status_code == 201

    r = client.put(f"/patients/{TELEGRAM_USER_ID}", json=payload)
    assert r.status_code == 200
    assert r.json()["subscription"] == "FREE"
    assert r.json()["requests"] == 20


def test_upsert_patient_invalid_age():
    r = client.put(f"/patients/{TELEGRAM_USER_ID}", json={"age": 0})
    assert r.status_code == 422


def test_quota_route(monkeypatch):
    monkeypatch.setattr(
        QuotaService,
        "check_user_requests",
        lambda db, uid: QuotaStatus(has_requests=True, is_premium=False, remaining_requests=4),
    )

    r = client.get(f"/patients/{TELEGRAM_USER_ID}/quota")
    assert r.status_code == 200
    assert r.json() == {"has_requests": True, "is_premium": False, "remaining_requests": 4}


def test_subscription_route(monkeypatch):
    monkeypatch.setattr(
        QuotaService,
        "update_subscription",
        lambda db, uid, tier: make_patient(subscription=tier),
    )

    r = client.put(f"/patients/{TELEGRAM_USER_ID}/subscription", json={"tier": "MEDICAL"})
    assert r.status_code == 200
    assert r.json()["subscription"] == "MEDICAL"

    r = client.put(f"/patients/{TELEGRAM_USER_ID}/subscription", json={"tier": "GOLD"})
    assert r.status_code == 422


# =============================================================================
# END-TO-END FLOWS (in-memory SQLite)
# =============================================================================


def test_log_summarize_and_delete_flow(db_session: Session):
    r = client.post(f"/users/{TELEGRAM_USER_ID}/meals", json={"text": TWO_DISH_REPLY})
    assert r.status_code == 201
    meals = r.json()
    assert [m["description"] for m in meals] == ["Café con leche", "Tostadas con manteca"]

    r = client.post(f"/users/{TELEGRAM_USER_ID}/meals", json={"text": APOLOGY_REPLY})
    assert r.status_code == 201
    assert r.json() == []

    r = client.get(f"/users/{TELEGRAM_USER_ID}/meals/summary")
    assert r.status_code == 200
    summary = r.json()
    assert len(summary["entries"]) == 2
    assert Decimal(summary["totals"]["kcal"]) == Decimal("370")
    assert summary["text"].startswith("📋 Resumen de hoy:")

    assert client.delete(f"/meals/{meals[0]['meal_id']}").status_code == 200
    assert client.delete(f"/meals/{meals[0]['meal_id']}").status_code == 404


def test_patient_quota_flow(db_session: Session):
    r = client.put("/patients/77", json={"name": "Martín", "age": 41})
    assert r.status_code == 201
    assert r.json()["requests"] == 20

    assert client.put("/patients/77", json={"weight": "80"}).status_code == 200

    r = client.post("/patients/77/quota/consume")
    assert r.status_code == 200
    assert r.json()["consumed"] is True
    assert r.json()["status"]["remaining_requests"] == 19

    r = client.put("/patients/77/subscription", json={"tier": "PRO"})
    assert r.status_code == 200
    assert r.json()["subscription"] == SubscriptionTier.PRO.value

    r = client.get("/patients/77/quota")
    assert r.json() == {"has_requests": True, "is_premium": True, "remaining_requests": None}

    assert client.put("/patients/78/subscription", json={"tier": "PRO"}).status_code == 404


def test_service_error_envelope_uses_exception_payload(monkeypatch):
    def fake_consume(db, user_id):
        raise ServiceValidationError(
            "Patient is blocked", details={"user_id": user_id}, code="PATIENT_BLOCKED"
        )

    monkeypatch.setattr(QuotaService, "consume", fake_consume)

    r = client.post(f"/patients/{TELEGRAM_USER_ID}/quota/consume")
    assert r.status_code == 400
    assert r.json()["error"] == {
        "code": "PATIENT_BLOCKED",
        "message": "Patient is blocked",
        "details": {"user_id": TELEGRAM_USER_ID},
    }

    r = client.post("/users/-5/meals", json={"text": TWO_DISH_REPLY})
    assert r.json()["error"]["details"] == {"user_id": -5}
