"""
Recurring transaction generator - books due transactions from recurring templates.

Called by the scheduler (hourly). For every active template the latest due
cycle <= today gets exactly one transaction; the template's tracking fields
are updated in the same unit of work. Per-template failures are isolated:
they are recorded on the template, reported in the stats and the run goes on.

Idempotency key: (recurring_template_id, occurred_on) is unique in
transactions, so a repeated or overlapping run cannot book the same cycle twice.
"""
import logging
from dataclasses import dataclass, field, asdict
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from budgethub.application.notifications import send_notification, RECURRING_GENERATED, RECURRING_FAILED
from budgethub.application.transactions import CreateTransactionUseCase
from budgethub.config import get_settings
from budgethub.domain.recurrence import due_date_reached
from budgethub.domain.result import Ok, Err, Result
from budgethub.infrastructure.db.models import (
    RecurringTransactionTemplate, Transaction, TEMPLATE_STATUS_FAILED,
)
from budgethub.infrastructure.db.queries import get_active_recurring_templates
from budgethub.utils.dates import local_today
from budgethub.utils.money import format_money

logger = logging.getLogger(__name__)

_GENERATED = "generated"
_SKIPPED = "skipped"

# failure_reason column is TEXT, but keep notifications and rows readable
_MAX_REASON_LENGTH = 500


@dataclass
class GenerationError:
    template_id: int
    error: str


@dataclass
class GenerationStats:
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[GenerationError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


class RecurringTransactionGenerator:
    def __init__(
        self,
        db: Session,
        max_consecutive_failures: int | None = None,
        currency: str | None = None,
    ):
        settings = get_settings()
        self.db = db
        self.max_consecutive_failures = (
            max_consecutive_failures
            if max_consecutive_failures is not None
            else settings.RECURRING_MAX_CONSECUTIVE_FAILURES
        )
        self.currency = currency or settings.DEFAULT_CURRENCY

    def run(self, today: date | None = None) -> Result[GenerationStats]:
        if today is None:
            today = local_today()

        fetched = get_active_recurring_templates(self.db)
        if isinstance(fetched, Err):
            return fetched

        # Snapshot ids: rollbacks below expire the ORM objects
        template_ids = [t.id for t in fetched.data]
        logger.info("Recurring generation for %s: %d active templates", today, len(template_ids))

        stats = GenerationStats()
        for template_id in template_ids:
            try:
                outcome = self._process(template_id, today)
            except IntegrityError:
                self.db.rollback()
                if self._reload(template_id) is not None and self._is_duplicate(template_id, today):
                    logger.warning("Template %d: cycle already booked by a concurrent run", template_id)
                    stats.skipped += 1
                    continue
                self._fail(stats, template_id, today, "Database constraint violated")
                continue
            except Exception as exc:
                self.db.rollback()
                self._fail(stats, template_id, today, str(exc) or exc.__class__.__name__)
                continue

            if outcome == _GENERATED:
                stats.success += 1
            else:
                stats.skipped += 1

        message = (
            f"Recurring transaction generation completed. "
            f"Success: {stats.success}, Failed: {stats.failed}, Skipped: {stats.skipped}"
        )
        logger.info(message)
        if stats.errors:
            logger.warning("Recurring generation errors: %s", [asdict(e) for e in stats.errors])
        return Ok(stats, message)

    def _reload(self, template_id: int) -> RecurringTransactionTemplate | None:
        return self.db.get(RecurringTransactionTemplate, template_id)

    def _is_duplicate(self, template_id: int, today: date) -> bool:
        tmpl = self._reload(template_id)
        due = due_date_reached(
            tmpl.start_date, tmpl.last_generated_date, tmpl.frequency_days, today, tmpl.end_date,
        )
        return due is not None and self._already_booked(template_id, due)

    def _already_booked(self, template_id: int, due: date) -> bool:
        return self.db.query(Transaction.id).filter(
            Transaction.recurring_template_id == template_id,
            Transaction.occurred_on == due,
        ).first() is not None

    def _process(self, template_id: int, today: date) -> str:
        tmpl = self._reload(template_id)
        if tmpl is None:
            return _SKIPPED

        due = due_date_reached(
            tmpl.start_date, tmpl.last_generated_date, tmpl.frequency_days, today, tmpl.end_date,
        )
        if due is None:
            logger.debug("Template %d not due yet", template_id)
            return _SKIPPED

        if self._already_booked(template_id, due):
            # Booked earlier but the template update was lost; just catch up
            tmpl.last_generated_date = due
            tmpl.consecutive_failures = 0
            tmpl.failure_reason = None
            self.db.commit()
            return _SKIPPED

        CreateTransactionUseCase(self.db).execute(
            hub_id=tmpl.hub_id,
            financial_account_id=tmpl.financial_account_id,
            category_id=tmpl.category_id,
            type=tmpl.type,
            amount=tmpl.amount,
            occurred_on=due,
            source=tmpl.source,
            note=tmpl.note,
            recurring_template_id=tmpl.id,
        )

        tmpl.last_generated_date = due
        tmpl.consecutive_failures = 0
        tmpl.failure_reason = None

        send_notification(
            self.db,
            hub_id=tmpl.hub_id,
            rule_code=RECURRING_GENERATED,
            language=tmpl.user_language,
            entity_type="recurring_template",
            entity_id=tmpl.id,
            meta={"template_id": tmpl.id, "due_date": due.isoformat()},
            source=tmpl.source or "",
            amount=format_money(tmpl.amount, self.currency),
            date=due.strftime("%d.%m.%Y"),
        )

        self.db.commit()
        logger.debug("Template %d: booked cycle %s", template_id, due)
        return _GENERATED

    def _fail(self, stats: GenerationStats, template_id: int, today: date, reason: str) -> None:
        logger.exception("Recurring generation failed for template_id=%d", template_id)
        stats.failed += 1
        stats.errors.append(GenerationError(template_id=template_id, error=reason))
        self._record_failure(template_id, today, reason[:_MAX_REASON_LENGTH])

    def _record_failure(self, template_id: int, today: date, reason: str) -> None:
        try:
            tmpl = self._reload(template_id)
            if tmpl is None:
                return
            tmpl.consecutive_failures = (tmpl.consecutive_failures or 0) + 1
            tmpl.last_failed_date = today
            tmpl.failure_reason = reason
            if tmpl.consecutive_failures >= self.max_consecutive_failures:
                tmpl.status = TEMPLATE_STATUS_FAILED
                logger.warning(
                    "Template %d disabled after %d consecutive failures",
                    template_id, tmpl.consecutive_failures,
                )

            send_notification(
                self.db,
                hub_id=tmpl.hub_id,
                rule_code=RECURRING_FAILED,
                language=tmpl.user_language,
                entity_type="recurring_template",
                entity_id=tmpl.id,
                meta={"template_id": tmpl.id, "reason": reason},
                source=tmpl.source or "",
                amount=format_money(tmpl.amount, self.currency),
                reason=reason,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not record failure for template_id=%d", template_id)


def generate_recurring_transactions(db: Session, today: date | None = None) -> Result[GenerationStats]:
    """Generate due transactions for all active templates across all hubs."""
    return RecurringTransactionGenerator(db).run(today)
