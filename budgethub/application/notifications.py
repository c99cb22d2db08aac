"""
In-app notifications emitted by the scheduled jobs.

Architecture:
- _TEMPLATES: title/message per rule code and language
- send_notification(): renders a template and adds a Notification row (flush, no commit)
- already_notified(): dedup check for monthly alerts
"""
import logging

from sqlalchemy.orm import Session

from budgethub.infrastructure.db.models import Notification

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

RECURRING_GENERATED = "RECURRING_GENERATED"
RECURRING_FAILED = "RECURRING_FAILED"
BUDGET_THRESHOLD_80 = "BUDGET_THRESHOLD_80"
BUDGET_THRESHOLD_100 = "BUDGET_THRESHOLD_100"

_SEVERITY: dict[str, str] = {
    RECURRING_GENERATED: "success",
    RECURRING_FAILED: "warning",
    BUDGET_THRESHOLD_80: "warning",
    BUDGET_THRESHOLD_100: "error",
}

# ---------------------------------------------------------------------------
# Message templates
# ---------------------------------------------------------------------------

_TEMPLATES: dict[str, dict[str, dict[str, str]]] = {
    RECURRING_GENERATED: {
        "en": {
            "title": "Recurring transaction created",
            "message": "\"{source}\" of {amount} was booked on {date}.",
        },
        "de": {
            "title": "Wiederkehrende Transaktion erstellt",
            "message": "\"{source}\" über {amount} wurde am {date} gebucht.",
        },
        "fr": {
            "title": "Transaction récurrente créée",
            "message": "« {source} » de {amount} a été comptabilisée le {date}.",
        },
        "it": {
            "title": "Transazione ricorrente creata",
            "message": "\"{source}\" di {amount} è stata registrata il {date}.",
        },
    },
    RECURRING_FAILED: {
        "en": {
            "title": "Recurring transaction failed",
            "message": "\"{source}\" of {amount} could not be booked: {reason}",
        },
        "de": {
            "title": "Wiederkehrende Transaktion fehlgeschlagen",
            "message": "\"{source}\" über {amount} konnte nicht gebucht werden: {reason}",
        },
        "fr": {
            "title": "Échec de la transaction récurrente",
            "message": "« {source} » de {amount} n'a pas pu être comptabilisée : {reason}",
        },
        "it": {
            "title": "Transazione ricorrente non riuscita",
            "message": "\"{source}\" di {amount} non è stata registrata: {reason}",
        },
    },
    BUDGET_THRESHOLD_80: {
        "en": {
            "title": "Budget Threshold Reached",
            "message": "Your budget for \"{category}\" has reached {percentage}% of the allocated amount ({spent} of {allocated}).",
        },
    },
    BUDGET_THRESHOLD_100: {
        "en": {
            "title": "Budget Exceeded",
            "message": "Your budget for \"{category}\" has been exceeded ({spent} of {allocated}).",
        },
    },
}


def render(rule_code: str, language: str | None, **ctx) -> tuple[str, str]:
    """Return (title, message) for the rule in the requested language, falling back to English."""
    try:
        variants = _TEMPLATES[rule_code]
    except KeyError:
        raise ValueError(f"Unknown notification rule: {rule_code}") from None
    lang = language if language in variants else DEFAULT_LANGUAGE
    tmpl = variants[lang]
    return tmpl["title"], tmpl["message"].format(**ctx)


def send_notification(
    db: Session,
    hub_id: int,
    rule_code: str,
    language: str | None = None,
    entity_type: str | None = None,
    entity_id: int | None = None,
    period: str | None = None,
    meta: dict | None = None,
    **ctx,
) -> Notification:
    title, message = render(rule_code, language, **ctx)
    notif = Notification(
        hub_id=hub_id,
        rule_code=rule_code,
        type=_SEVERITY[rule_code],
        title=title,
        message=message,
        entity_type=entity_type,
        entity_id=entity_id,
        period=period,
        meta=meta,
        is_read=False,
    )
    db.add(notif)
    db.flush()
    logger.debug("Notification %s queued for hub_id=%d", rule_code, hub_id)
    return notif


def already_notified(
    db: Session,
    hub_id: int,
    rule_code: str,
    entity_type: str | None,
    entity_id: int | None,
    period: str | None,
) -> bool:
    """Return True if a notification with this dedup key already exists."""
    return (
        db.query(Notification.id)
        .filter(
            Notification.hub_id == hub_id,
            Notification.rule_code == rule_code,
            Notification.entity_type == entity_type,
            Notification.entity_id == entity_id,
            Notification.period == period,
        )
        .first()
        is not None
    )
