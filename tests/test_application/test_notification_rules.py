"""
Tests for notification rendering and deduplication
"""
import pytest

from budgethub.application.notifications import (
    render, send_notification, already_notified,
    RECURRING_GENERATED, RECURRING_FAILED, BUDGET_THRESHOLD_80,
)


class TestRender:
    def test_english(self):
        title, message = render(RECURRING_GENERATED, "en", source="Rent", amount="CHF 1'000.00", date="31.01.2024")
        assert title == "Recurring transaction created"
        assert message == "\"Rent\" of CHF 1'000.00 was booked on 31.01.2024."

    @pytest.mark.parametrize("language", ["de", "fr", "it"])
    def test_translations_exist(self, language):
        title, _ = render(RECURRING_FAILED, language, source="Rent", amount="CHF 1.00", reason="x")
        assert title != "Recurring transaction failed"

    def test_unknown_language_falls_back_to_english(self):
        title, _ = render(BUDGET_THRESHOLD_80, "es", category="Food", percentage=80, spent="CHF 80.00", allocated="CHF 100.00")
        assert title == "Budget Threshold Reached"

    def test_budget_alerts_are_english_only(self):
        title, message = render(
            BUDGET_THRESHOLD_80, "de", category="Food", percentage=80, spent="CHF 80.00", allocated="CHF 100.00",
        )
        assert title == "Budget Threshold Reached"
        assert "reached 80%" in message

    def test_missing_language_falls_back_to_english(self):
        title, _ = render(BUDGET_THRESHOLD_80, None, category="Food", percentage=80, spent="CHF 80.00", allocated="CHF 100.00")
        assert title == "Budget Threshold Reached"

    def test_unknown_rule(self):
        with pytest.raises(ValueError, match="Unknown notification rule"):
            render("NOPE", "en")


class TestSendNotification:
    def test_row_created_with_severity(self, db_session, hub):
        notif = send_notification(
            db_session, hub_id=hub.id, rule_code=RECURRING_FAILED, language="fr",
            entity_type="recurring_template", entity_id=7, meta={"template_id": 7},
            source="Loyer", amount="CHF 10.00", reason="Insufficient funds",
        )

        assert notif.id is not None
        assert notif.type == "warning"
        assert notif.is_read is False
        assert notif.meta == {"template_id": 7}
        assert notif.title == "Échec de la transaction récurrente"

    def test_dedup_key(self, db_session, hub):
        send_notification(
            db_session, hub_id=hub.id, rule_code=BUDGET_THRESHOLD_80,
            entity_type="budget", entity_id=3, period="2026-03",
            category="Food", percentage=80, spent="CHF 80.00", allocated="CHF 100.00",
        )

        assert already_notified(db_session, hub.id, BUDGET_THRESHOLD_80, "budget", 3, "2026-03")
        assert not already_notified(db_session, hub.id, BUDGET_THRESHOLD_80, "budget", 3, "2026-04")
        assert not already_notified(db_session, hub.id, BUDGET_THRESHOLD_80, "budget", 4, "2026-03")
