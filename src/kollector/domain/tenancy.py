"""Explicit tenant context passed into catalog operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kollector.domain.errors import UnauthenticatedError
from kollector.domain.model import TenantId

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TenantContext:
    """Who is calling, and on whose behalf.

    Administrators may act as another tenant; that choice is carried here as
    data instead of being read from request state.
    """

    user_id: TenantId | None
    is_admin: bool = False
    act_as: TenantId | None = None

    def current_tenant_id(self) -> TenantId | None:
        if self.user_id is None:
            return None
        if self.act_as is None or self.act_as == self.user_id:
            return self.user_id
        if not self.is_admin:
            log.warning(
                "Ignoring act-as request for %s from non-admin user %s", self.act_as, self.user_id
            )
            return self.user_id
        log.info("Admin %s acting as tenant %s", self.user_id, self.act_as)
        return self.act_as


def require_tenant(tenant_id: TenantId | None) -> TenantId:
    if tenant_id is None:
        raise UnauthenticatedError
    return tenant_id
