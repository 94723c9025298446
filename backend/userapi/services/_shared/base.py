# userapi/services/_shared/base.py
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from userapi.core.logger import to_safe_args, to_safe_value
from userapi.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

T = TypeVar("T")

log = logging.getLogger("userapi.services")


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting call-scoped data.

    :param request_id: Correlation id for logging/tracing.
    :param in_http_call: ``True`` when the API layer already logs this call,
        in which case service-level call logging is skipped.
    """

    request_id: str | None = None
    in_http_call: bool = False


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Log service calls made outside an HTTP request.

    Notes
    -----
    Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional call-scoped context (tracing, call origin).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    # --------------------------- Call logging -------------------------------

    def run_logged(self, name: str, fn: Callable[..., T], *args: Any) -> T:
        """
        Run ``fn(*args)`` and log start/outcome/duration.

        Logging is skipped entirely when ``ctx.in_http_call`` is set. Errors
        are logged by class name only and re-raised unchanged.

        :param name: Operation label (e.g. ``"UserRegistrationService.register"``).
        :param fn: Callable to execute.
        :returns: Result of ``fn``.
        """
        if self.ctx.in_http_call:
            return fn(*args)

        extra = {"request_id": self.ctx.request_id}
        start = time.perf_counter()
        if log.isEnabledFor(logging.DEBUG):
            log.debug("ServiceCall START %s args=%s", name, to_safe_args(args), extra=extra)
        try:
            result = fn(*args)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            log.warning(
                "ServiceCall FAIL %s duration=%dms exception=%s",
                name,
                elapsed_ms,
                type(exc).__name__,
                extra=extra,
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                "ServiceCall SUCCESS %s duration=%dms result=%s",
                name,
                elapsed_ms,
                to_safe_value(result),
                extra=extra,
            )
        else:
            log.info("ServiceCall SUCCESS %s duration=%dms", name, elapsed_ms, extra=extra)
        return result
