"""Service layer public API.

Callers can import from :mod:`userapi.services` without knowing the internal
structure.

Re-exports
----------
- Base primitives (from ``userapi.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Failure signals (from ``userapi.services._shared.errors``)
    * :class:`ServiceError`
    * :class:`ErrorKind`

- Registration (from ``userapi.services.registration``)
    * :class:`UserRegistrationService`
    * DTOs: :class:`RegistrationIn`, :class:`UserOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.errors import ErrorKind, ServiceError
from .registration.dto import RegistrationIn, UserOut
from .registration.service import UserRegistrationService

__all__ = [
    "BaseService",
    "ServiceContext",
    "ErrorKind",
    "ServiceError",
    "RegistrationIn",
    "UserOut",
    "UserRegistrationService",
]
