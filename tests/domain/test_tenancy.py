from __future__ import annotations

from uuid import uuid4

import pytest

from kollector.domain.errors import ErrorKind, UnauthenticatedError
from kollector.domain.tenancy import TenantContext, require_tenant


def test_current_tenant_is_caller_by_default() -> None:
    user = uuid4()

    assert TenantContext(user_id=user).current_tenant_id() == user


def test_admin_may_act_as_other_tenant() -> None:
    admin, target = uuid4(), uuid4()

    context = TenantContext(user_id=admin, is_admin=True, act_as=target)

    assert context.current_tenant_id() == target


def test_non_admin_act_as_is_ignored() -> None:
    user, target = uuid4(), uuid4()

    context = TenantContext(user_id=user, act_as=target)

    assert context.current_tenant_id() == user


def test_anonymous_context_has_no_tenant() -> None:
    assert TenantContext(user_id=None, is_admin=True, act_as=uuid4()).current_tenant_id() is None


def test_require_tenant_raises_unauthenticated() -> None:
    with pytest.raises(UnauthenticatedError) as exc:
        require_tenant(None)

    assert exc.value.kind is ErrorKind.UNAUTHENTICATED
