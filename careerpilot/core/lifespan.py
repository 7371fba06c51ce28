import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from careerpilot.ai.factory import build_completion_client
from careerpilot.analytics.db import init_db, purge_old_records
from careerpilot.core.config import settings
from careerpilot.services.usage_tracker import UsageTracker
from careerpilot.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = DocumentStore(settings.document_db_path)
    app.state.document_store = store
    app.state.usage_tracker = UsageTracker(store)
    app.state.completion_client = build_completion_client()
    init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except Exception as exc:  # noqa: BLE001
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    store.close()
