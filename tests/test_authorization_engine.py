import pytest

from app.inventory.core.authorization import (
    Action,
    Outcome,
    ResourceKind,
    ROLE_ACTIONS,
    authorize,
    decide,
    resolve_create_tenant,
)
from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.lifecycle import LifecycleState
from app.inventory.core.principal import Principal, Role


def _principal(role: Role, tenant_id: int | None = 5) -> Principal:
    return Principal(
        role=role,
        tenant_id=None if role is Role.SYSTEM_ADMIN else tenant_id,
        subject_id="1",
        display_name=f"{role.value.lower()}-user",
    )


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
@pytest.mark.parametrize("action", [a for a in Action if a not in (Action.LIST, Action.CREATE)])
@pytest.mark.parametrize("state", list(LifecycleState))
def test_cross_tenant_is_denied_for_scoped_roles(role, action, state):
    decision = decide(_principal(role, tenant_id=5), action, resource_tenant_id=7, resource_state=state)

    assert decision.outcome is Outcome.DENY
    assert decision.error == ErrorCatalog.CROSS_TENANT_ACCESS_DENIED


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
def test_cross_tenant_listing_is_denied(role):
    decision = decide(_principal(role, tenant_id=5), Action.LIST, requested_tenant_id=7)

    assert decision.outcome is Outcome.DENY
    assert decision.error == ErrorCatalog.CROSS_TENANT_ACCESS_DENIED


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
def test_listing_carries_own_tenant_filter(role):
    decision = decide(_principal(role, tenant_id=5), Action.LIST)

    assert decision.allowed
    assert decision.tenant_filter == 5


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
@pytest.mark.parametrize("action", list(Action))
def test_scoped_role_without_tenant_claim_is_malformed(role, action):
    principal = Principal(role=role, tenant_id=None, subject_id="1", display_name="broken")

    decision = decide(principal, action, resource_tenant_id=5)

    assert decision.outcome is Outcome.DENY
    assert decision.error == ErrorCatalog.TENANT_SCOPE_REQUIRED
    assert decision.source == "malformed_principal"


@pytest.mark.parametrize("action", [Action.DELETE, Action.RESTORE])
@pytest.mark.parametrize("state", list(LifecycleState))
def test_staff_can_never_delete_or_restore(action, state):
    decision = decide(_principal(Role.STAFF), action, resource_tenant_id=5, resource_state=state)

    assert decision.outcome is Outcome.DENY
    assert decision.error == ErrorCatalog.PERMISSION_DENIED


@pytest.mark.parametrize("action", [Action.READ, Action.CREATE, Action.UPDATE])
def test_staff_can_read_create_and_update_own_tenant(action):
    assert decide(_principal(Role.STAFF), action, resource_tenant_id=5).allowed


def test_owner_delete_and_restore_follow_lifecycle_state():
    owner = _principal(Role.OWNER)

    assert decide(owner, Action.DELETE, resource_tenant_id=5).allowed
    assert decide(owner, Action.RESTORE, resource_tenant_id=5, resource_state=LifecycleState.DELETED).allowed


_STATE_CONFLICTS = [
    (Action.UPDATE, LifecycleState.DELETED, ErrorCatalog.RESOURCE_DELETED),
    (Action.DELETE, LifecycleState.DELETED, ErrorCatalog.RESOURCE_ALREADY_DELETED),
    (Action.RESTORE, LifecycleState.ACTIVE, ErrorCatalog.RESOURCE_NOT_DELETED),
]


@pytest.mark.parametrize(
    "role,action,state,error",
    [
        (role, action, state, error)
        for role in Role
        for action, state, error in _STATE_CONFLICTS
        if action in ROLE_ACTIONS[ResourceKind.PRODUCT][role]
    ],
)
def test_state_conflicts_apply_to_every_role_allowed_to_act(role, action, state, error):
    decision = decide(_principal(role), action, resource_tenant_id=5, resource_state=state)

    assert decision.outcome is Outcome.STATE_CONFLICT
    assert decision.error == error


@pytest.mark.parametrize("action", list(Action))
def test_system_admin_is_not_tenant_scoped(action):
    state = LifecycleState.DELETED if action is Action.RESTORE else LifecycleState.ACTIVE

    decision = decide(_principal(Role.SYSTEM_ADMIN), action, resource_tenant_id=42, resource_state=state)

    assert decision.allowed
    assert decision.tenant_filter is None


def test_system_admin_listing_filter_is_opt_in():
    admin = _principal(Role.SYSTEM_ADMIN)

    assert decide(admin, Action.LIST).tenant_filter is None
    assert decide(admin, Action.LIST, requested_tenant_id=7).tenant_filter == 7
    assert decide(admin, Action.LIST, requested_tenant_id=7, admin_tenant_filter=False).tenant_filter is None


def test_include_deleted_is_reserved_for_restoring_roles():
    assert decide(_principal(Role.STAFF), Action.LIST, include_deleted=True).outcome is Outcome.DENY
    assert decide(_principal(Role.OWNER), Action.LIST, include_deleted=True).allowed
    assert decide(_principal(Role.SYSTEM_ADMIN), Action.LIST, include_deleted=True).allowed


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
@pytest.mark.parametrize("action", [Action.LIST, Action.CREATE])
def test_store_listing_and_creation_are_admin_only(role, action):
    decision = decide(_principal(role), action, resource=ResourceKind.STORE)

    assert decision.outcome is Outcome.DENY
    assert decision.error == ErrorCatalog.PERMISSION_DENIED


def test_store_rules_per_role():
    staff = _principal(Role.STAFF)
    owner = _principal(Role.OWNER)

    assert decide(staff, Action.READ, resource_tenant_id=5, resource=ResourceKind.STORE).allowed
    assert not decide(staff, Action.UPDATE, resource_tenant_id=5, resource=ResourceKind.STORE).allowed
    assert decide(owner, Action.UPDATE, resource_tenant_id=5, resource=ResourceKind.STORE).allowed
    assert decide(owner, Action.DELETE, resource_tenant_id=5, resource=ResourceKind.STORE).allowed
    assert not decide(owner, Action.DELETE, resource_tenant_id=6, resource=ResourceKind.STORE).allowed


def test_role_table_covers_every_role():
    for table in ROLE_ACTIONS.values():
        assert set(table) == set(Role)


@pytest.mark.parametrize("role", [Role.STAFF, Role.OWNER])
@pytest.mark.parametrize("requested", [None, 5, 7, 999])
def test_create_tenant_is_overridden_for_scoped_roles(role, requested):
    assert resolve_create_tenant(_principal(role, tenant_id=5), requested) == 5


def test_create_tenant_is_passed_through_for_system_admin():
    admin = _principal(Role.SYSTEM_ADMIN)

    assert resolve_create_tenant(admin, 7) == 7
    assert resolve_create_tenant(admin, None) is None


def test_authorize_raises_app_error_with_decision_error():
    with pytest.raises(AppError) as exc:
        authorize(_principal(Role.OWNER, tenant_id=5), Action.UPDATE, resource_tenant_id=7)

    assert exc.value.error == ErrorCatalog.CROSS_TENANT_ACCESS_DENIED
    assert exc.value.details == {"action": "update"}
