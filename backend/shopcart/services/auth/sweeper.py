from __future__ import annotations

import logging
from dataclasses import dataclass

from shopcart.services._shared.clock import Clock, epoch_millis
from shopcart.services._shared.ports.refresh_token_store import RefreshTokenStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SweepReport:
    """
    Outcome of one sweep run.

    :ivar scanned: Expired records found.
    :ivar deleted: Records this run removed.
    :ivar failed: Records whose deletion raised.
    :ivar ok: ``False`` when the expired-records query itself failed.
    """

    scanned: int
    deleted: int
    failed: int
    ok: bool = True


class RefreshTokenSweeper:
    """
    Delete refresh tokens whose expiry has passed.

    Storage reclamation only: :class:`SessionTokenService` already rejects
    expired tokens. A failing record never stops the batch, and a failing
    query is logged and left for the next scheduled run.
    """

    def __init__(self, store: RefreshTokenStore, *, clock: Clock = epoch_millis) -> None:
        self.store = store
        self.clock = clock

    def sweep(self) -> SweepReport:
        now = self.clock()
        try:
            expired = self.store.find_expired(now)
        except Exception:
            log.exception("refresh_tokens.sweep.query_failed")
            return SweepReport(scanned=0, deleted=0, failed=0, ok=False)

        deleted = failed = 0
        for record in expired:
            try:
                if self.store.delete_by_token(record.token):
                    deleted += 1
            except Exception:
                failed += 1
                log.warning(
                    "refresh_tokens.sweep.delete_failed",
                    extra={"shopper_id": record.shopper_id},
                    exc_info=True,
                )

        report = SweepReport(scanned=len(expired), deleted=deleted, failed=failed)
        log.info(
            "refresh_tokens.sweep.done",
            extra={"scanned": report.scanned, "deleted": report.deleted, "failed": report.failed},
        )
        return report
