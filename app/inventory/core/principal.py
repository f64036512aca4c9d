from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from app.inventory.core.error_catalog import AppError, ErrorCatalog


CLAIM_SUBJECT = "sub"
CLAIM_UNIQUE_NAME = "unique_name"
CLAIM_ROLE = "role"
CLAIM_STORE_ID = "StoreId"


class Role(str, Enum):
    STAFF = "Staff"
    OWNER = "Owner"
    SYSTEM_ADMIN = "SystemAdmin"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        try:
            return cls(value)
        except ValueError as exc:
            raise AppError(ErrorCatalog.INVALID_TOKEN, details={"message": f"Unknown role: {value!r}"}) from exc


def _parse_tenant_id(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a single request.

    Built only from verified claims. ``tenant_id`` is the store the caller
    belongs to; it is always ``None`` for a SystemAdmin.
    """

    role: Role
    tenant_id: int | None
    subject_id: str
    display_name: str

    @property
    def is_system_admin(self) -> bool:
        return self.role is Role.SYSTEM_ADMIN

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        subject_id = claims.get(CLAIM_SUBJECT)
        if not subject_id:
            raise AppError(ErrorCatalog.INVALID_TOKEN, details={"message": "Missing subject claim"})
        role = Role.parse(claims.get(CLAIM_ROLE))
        tenant_id = None if role is Role.SYSTEM_ADMIN else _parse_tenant_id(claims.get(CLAIM_STORE_ID))
        return cls(
            role=role,
            tenant_id=tenant_id,
            subject_id=str(subject_id),
            display_name=str(claims.get(CLAIM_UNIQUE_NAME) or subject_id),
        )

    def to_claims(self) -> dict[str, str]:
        claims = {
            CLAIM_SUBJECT: self.subject_id,
            CLAIM_UNIQUE_NAME: self.display_name,
            CLAIM_ROLE: self.role.value,
        }
        if self.tenant_id is not None:
            claims[CLAIM_STORE_ID] = str(self.tenant_id)
        return claims
