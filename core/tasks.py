import asyncio
import logging

from sqlmodel import Session

from core.db import engine
from services.integrity import IntegrityReport, remove_orphans

logger = logging.getLogger(__name__)


def reconcile_integrity(bind=None) -> IntegrityReport:
    """Run one orphan-removal pass in its own session"""
    with Session(bind or engine) as session:
        return remove_orphans(session)


async def periodic_integrity_check(interval: int):
    """Periodically remove orphaned posts and likes"""
    while True:
        try:
            # The ORM work is blocking, keep it off the event loop
            await asyncio.to_thread(reconcile_integrity)
        except Exception as e:
            logger.error(f"Error in integrity check task: {e}", exc_info=True)
        await asyncio.sleep(interval)
