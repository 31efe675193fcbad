from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopcart.services._shared.errors import AuthenticationRequired
from shopcart.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

if TYPE_CHECKING:  # pragma: no cover
    from shopcart.models.shopper import Shopper


@dataclass(slots=True)
class ServiceContext:
    """
    Carry request-scoped data explicitly through the call chain.

    :param actor_id: Authenticated shopper identifier.
    :param request_id: Correlation id for logging/tracing.
    :param principal: Authenticated shopper attached by the authentication
        gate. ``None`` means the request is unauthenticated.
    :param device_id: Client device identifier, when supplied.
    """

    actor_id: str | None = None
    request_id: str | None = None
    principal: Shopper | None = None
    device_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    def with_principal(self, shopper: Shopper) -> ServiceContext:
        """Return a copy of this context carrying ``shopper`` as principal."""
        return ServiceContext(
            actor_id=str(shopper.id),
            request_id=self.request_id,
            principal=shopper,
            device_id=self.device_id,
        )


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Expose the request context and the authenticated actor.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    Services never touch the global session directly; they always use a Unit
    of Work. Error translation to HTTP happens once in ``core/errors.py``.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    # --------------------------- AuthN --------------------------------

    def require_actor(self) -> str:
        """
        Return the authenticated shopper id of the current context.

        :raises AuthenticationRequired: When no principal is attached.
        """
        if self.ctx.actor_id is None:
            raise AuthenticationRequired()
        return self.ctx.actor_id
