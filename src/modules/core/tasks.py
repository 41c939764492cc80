"""Asynchronous tasks of the core module."""

from __future__ import annotations

from typing import Dict

import structlog
from celery import shared_task

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = 100) -> Dict[str, int]:
    """Relay PENDING outbox rows to the in-process event bus.

    Rows are processed oldest first.  A row whose event cannot be rebuilt
    or whose handler raises is marked FAILED with the error recorded, and
    the relay moves on to the next row.
    """
    pending = OutboxEvent.objects.filter(status=EventStatus.PENDING).order_by(
        "created_at"
    )[:batch_size]

    published = failed = 0
    for outbox in pending:
        log = logger.bind(outbox_id=str(outbox.id), event_type=outbox.event_type)
        try:
            event = DomainEvent.from_payload(outbox.event_type, outbox.payload)
            event_bus.publish(event)
        except Exception as exc:
            outbox.mark_as_failed(f"{type(exc).__name__}: {exc}")
            log.warning("outbox.relay_failed", error=str(exc))
            failed += 1
        else:
            outbox.mark_as_published()
            published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
