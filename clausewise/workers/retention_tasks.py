import asyncio
import logging

from clausewise.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="retention.cleanup_expired_contracts", bind=True, acks_late=True)
def task_cleanup_expired_contracts(self) -> dict:
    """Delete files of contracts past their retention window and mark them expired.

    Safe to run while another sweep is in flight; rows already expired are not
    selected again.
    """
    from clausewise.middleware import set_request_id

    set_request_id(f"sweep-{self.request.id}" if self.request.id else None)
    logger.info("[cleanup_expired_contracts] Starting")
    return asyncio.run(_cleanup_async())


async def _cleanup_async() -> dict:
    from clausewise.config import Settings
    from clausewise.database import create_engine, create_session_factory
    from clausewise.services.retention_service import RetentionService
    from clausewise.services.storage.factory import create_storage

    settings = Settings()
    engine = create_engine(settings)
    factory = create_session_factory(engine)

    try:
        service = RetentionService(
            factory,
            create_storage(settings),
            batch_size=settings.SWEEP_BATCH_SIZE,
            time_budget_seconds=settings.SWEEP_TIME_BUDGET_SECONDS,
        )
        result = await service.sweep()
    except Exception as exc:
        # No retry here: the next scheduled run picks up whatever is left
        logger.exception(f"[cleanup_expired_contracts] Failed: {exc}")
        return {"status": "failed", "error": str(exc), "deleted": 0}
    finally:
        await engine.dispose()

    logger.info(f"[cleanup_expired_contracts] Done: {result.message}")
    return {
        "status": "completed",
        "message": result.message,
        "deleted": result.deleted,
        "file_errors": result.file_errors,
        "update_errors": result.update_errors,
        "files_retried": result.files_retried,
    }
