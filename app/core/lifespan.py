"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring: board store, mutation processor, WebSocket
registry, broadcast fan-out, attachment storage and the sync gateway are
built once and kept on app.state.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: board store, registry + broadcaster (fan-out task
    started), mutation processor, storage, attachment service, gateway.
    Shutdown stops the fan-out task.
    """
    settings = get_settings()

    # ---- Startup ----
    from app.api.websocket import Broadcaster, ConnectionRegistry, SyncGateway
    from app.application.services.board_store import BoardStore
    from app.application.use_cases.attachments import AttachmentService
    from app.application.use_cases.mutations import MutationProcessor
    from app.infrastructure.external.storage.factory import StorageFactory

    store = BoardStore(settings.column_names, settings.initial_column)
    registry = ConnectionRegistry()
    broadcaster = Broadcaster(registry)
    broadcaster.start()
    processor = MutationProcessor(store, broadcaster)
    storage = StorageFactory.create_storage_service(settings)

    app.state.board_store = store
    app.state.ws_manager = registry
    app.state.broadcaster = broadcaster
    app.state.mutation_processor = processor
    app.state.storage = storage
    app.state.attachment_service = AttachmentService(
        processor,
        storage,
        url_prefix=settings.attachment_url_prefix,
        max_upload_size=settings.max_upload_size,
    )
    app.state.sync_gateway = SyncGateway(
        store,
        processor,
        registry,
        queue_size=settings.ws_outbound_queue_size,
        send_timeout=settings.ws_send_timeout_seconds,
    )
    logger.info(
        "Board ready: columns=%s initial=%r storage=%s",
        store.columns,
        store.initial_column,
        settings.storage_root,
    )

    yield

    # ---- Shutdown ----
    await broadcaster.stop()
    logger.info(
        "Board shut down at version %d (%d events published)",
        store.version,
        broadcaster.published_count,
    )
