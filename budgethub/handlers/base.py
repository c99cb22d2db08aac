"""
Shared plumbing for job handlers.

A handler opens a session on the given Database, runs one engine and maps
its Result to {"statusCode": int, "body": json-string}:
  Ok  -> 200 {"success": true, "message": ..., <payload>}
  Err -> 500 {"success": false, "message": ...}
Uncaught exceptions are logged and reported as 500 as well.
"""
import json
import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from budgethub.domain.result import Ok, Result
from budgethub.infrastructure.db.session import Database

logger = logging.getLogger(__name__)


def response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body)}


def run_job(
    database: Database,
    job_name: str,
    engine: Callable[[Session], Result],
    payload: Callable[[Any], dict[str, Any]],
) -> dict[str, Any]:
    """
    Args:
        database: store handle
        job_name: label for logs
        engine: callable(db) -> Result
        payload: maps Ok.data to the extra body fields
    """
    logger.info("Starting %s job...", job_name)
    db = database.session()
    try:
        result = engine(db)
        if isinstance(result, Ok):
            logger.info("%s completed: %s", job_name, result.message)
            return response(200, {"success": True, "message": result.message, **payload(result.data)})

        logger.error("%s failed (%s): %s", job_name, result.kind.value, result.message)
        return response(500, {"success": False, "message": result.message})
    except Exception as exc:
        logger.exception("Unexpected error in %s job", job_name)
        return response(500, {"success": False, "message": str(exc) or "Unexpected error occurred"})
    finally:
        db.close()
