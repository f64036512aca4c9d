from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from app.inventory.core.error_catalog import AppError, ErrorCatalog, ErrorDefinition
from app.inventory.core.lifecycle import LifecycleState
from app.inventory.core.principal import Principal, Role

logger = logging.getLogger(__name__)


class Action(str, Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"


class ResourceKind(str, Enum):
    PRODUCT = "product"
    STORE = "store"


class Outcome(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    STATE_CONFLICT = "state_conflict"


_ALL_ACTIONS = frozenset(Action)

ROLE_ACTIONS: dict[ResourceKind, dict[Role, frozenset[Action]]] = {
    ResourceKind.PRODUCT: {
        Role.STAFF: frozenset({Action.LIST, Action.READ, Action.CREATE, Action.UPDATE}),
        Role.OWNER: _ALL_ACTIONS,
        Role.SYSTEM_ADMIN: _ALL_ACTIONS,
    },
    ResourceKind.STORE: {
        Role.STAFF: frozenset({Action.READ}),
        Role.OWNER: frozenset({Action.READ, Action.UPDATE, Action.DELETE, Action.RESTORE}),
        Role.SYSTEM_ADMIN: _ALL_ACTIONS,
    },
}

for _kind in ResourceKind:
    _missing = set(Role) - set(ROLE_ACTIONS.get(_kind, {}))
    if _missing:
        raise RuntimeError(f"Role table for {_kind.value} is missing {sorted(role.value for role in _missing)}")


@dataclass(frozen=True)
class AccessDecision:
    action: Action
    outcome: Outcome
    source: str
    tenant_filter: int | None = None
    error: ErrorDefinition | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOW

    def raise_for_outcome(self) -> "AccessDecision":
        if self.allowed:
            return self
        raise AppError(self.error or ErrorCatalog.PERMISSION_DENIED, details={"action": self.action.value})


def _allow(action: Action, source: str, tenant_filter: int | None = None) -> AccessDecision:
    return AccessDecision(action=action, outcome=Outcome.ALLOW, source=source, tenant_filter=tenant_filter)


def _deny(action: Action, source: str, error: ErrorDefinition) -> AccessDecision:
    return AccessDecision(action=action, outcome=Outcome.DENY, source=source, error=error)


def _state_conflict(action: Action, state: LifecycleState) -> AccessDecision | None:
    if action is Action.RESTORE:
        if state is LifecycleState.ACTIVE:
            return AccessDecision(
                action=action,
                outcome=Outcome.STATE_CONFLICT,
                source="lifecycle",
                error=ErrorCatalog.RESOURCE_NOT_DELETED,
            )
        return None
    if state is LifecycleState.DELETED:
        if action is Action.DELETE:
            error = ErrorCatalog.RESOURCE_ALREADY_DELETED
        elif action is Action.UPDATE:
            error = ErrorCatalog.RESOURCE_DELETED
        else:
            return None
        return AccessDecision(action=action, outcome=Outcome.STATE_CONFLICT, source="lifecycle", error=error)
    return None


def can_include_deleted(role: Role, resource: ResourceKind) -> bool:
    return Action.RESTORE in ROLE_ACTIONS[resource][role]


def decide(
    principal: Principal,
    action: Action,
    resource_tenant_id: int | None = None,
    resource_state: LifecycleState = LifecycleState.ACTIVE,
    *,
    resource: ResourceKind = ResourceKind.PRODUCT,
    requested_tenant_id: int | None = None,
    include_deleted: bool = False,
    admin_tenant_filter: bool = True,
) -> AccessDecision:
    """Decide whether ``principal`` may perform ``action``.

    Rules are applied in order and the first match wins:

    1. SystemAdmin passes every tenant check. Listings stay unfiltered unless
       ``requested_tenant_id`` is given and ``admin_tenant_filter`` is on.
    2. Staff/Owner without a tenant claim are denied.
    3. Any target tenant other than the caller's own is denied. Creation is
       exempt because its tenant is overridden, see ``resolve_create_tenant``.
    4. The role table decides which actions each role may perform.
    5. Update/Delete of a deleted record and Restore of an active record are
       state conflicts, for every role.
    6. Otherwise allow; listings carry the caller's tenant as filter.

    For stores the tenant id of the resource is the store id itself.
    """
    allowed_actions = ROLE_ACTIONS[resource][principal.role]

    if principal.is_system_admin:
        if action not in allowed_actions:
            return _deny(action, "role_table", ErrorCatalog.PERMISSION_DENIED)
        conflict = _state_conflict(action, resource_state)
        if conflict is not None:
            return conflict
        tenant_filter = None
        if action is Action.LIST and admin_tenant_filter:
            tenant_filter = requested_tenant_id
        return _allow(action, "system_admin", tenant_filter)

    if principal.tenant_id is None:
        return _deny(action, "malformed_principal", ErrorCatalog.TENANT_SCOPE_REQUIRED)

    if action is Action.LIST:
        if requested_tenant_id is not None and requested_tenant_id != principal.tenant_id:
            return _deny(action, "tenant_scope", ErrorCatalog.CROSS_TENANT_ACCESS_DENIED)
    elif action is not Action.CREATE and resource_tenant_id != principal.tenant_id:
        return _deny(action, "tenant_scope", ErrorCatalog.CROSS_TENANT_ACCESS_DENIED)

    if action not in allowed_actions:
        return _deny(action, "role_table", ErrorCatalog.PERMISSION_DENIED)

    if include_deleted and action in (Action.LIST, Action.READ) and not can_include_deleted(principal.role, resource):
        return _deny(action, "include_deleted", ErrorCatalog.PERMISSION_DENIED)

    conflict = _state_conflict(action, resource_state)
    if conflict is not None:
        return conflict

    if action is Action.LIST:
        return _allow(action, "tenant_scope", principal.tenant_id)
    return _allow(action, "role_table")


def resolve_create_tenant(principal: Principal, requested_tenant_id: int | None) -> int | None:
    """Tenant a new record is written to.

    Non-admin callers always write to their own tenant whatever the payload
    says. A SystemAdmin's value is returned unchanged; the caller still has to
    check it names an existing store.
    """
    if principal.is_system_admin:
        return requested_tenant_id
    if requested_tenant_id is not None and requested_tenant_id != principal.tenant_id:
        logger.info(
            "Overriding requested tenant on create",
            extra={
                "subject_id": principal.subject_id,
                "requested_tenant_id": requested_tenant_id,
                "resolved_tenant_id": principal.tenant_id,
            },
        )
    return principal.tenant_id


def authorize(principal: Principal, action: Action, **kwargs) -> AccessDecision:
    decision = decide(principal, action, **kwargs)
    if not decision.allowed:
        logger.info(
            "Access refused",
            extra={
                "subject_id": principal.subject_id,
                "role": principal.role.value,
                "action": action.value,
                "outcome": decision.outcome.value,
                "source": decision.source,
            },
        )
    return decision.raise_for_outcome()
