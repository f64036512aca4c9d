from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    TOKEN_EXPIRED = ErrorDefinition("TOKEN_EXPIRED", "Token expired", status.HTTP_401_UNAUTHORIZED)
    INVALID_CREDENTIALS = ErrorDefinition(
        "INVALID_CREDENTIALS",
        "Invalid username or password",
        status.HTTP_401_UNAUTHORIZED,
    )
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    TENANT_SCOPE_REQUIRED = ErrorDefinition(
        "TENANT_SCOPE_REQUIRED",
        "Tenant scope is required",
        status.HTTP_403_FORBIDDEN,
    )
    CROSS_TENANT_ACCESS_DENIED = ErrorDefinition(
        "CROSS_TENANT_ACCESS_DENIED",
        "Cross-tenant access denied",
        status.HTTP_403_FORBIDDEN,
    )
    RESOURCE_ALREADY_DELETED = ErrorDefinition(
        "RESOURCE_ALREADY_DELETED",
        "Resource is already deleted",
        status.HTTP_400_BAD_REQUEST,
    )
    RESOURCE_NOT_DELETED = ErrorDefinition(
        "RESOURCE_NOT_DELETED",
        "Resource is not deleted",
        status.HTTP_400_BAD_REQUEST,
    )
    RESOURCE_DELETED = ErrorDefinition(
        "RESOURCE_DELETED",
        "Deleted resources cannot be modified",
        status.HTTP_400_BAD_REQUEST,
    )
    STORE_DELETED = ErrorDefinition(
        "STORE_DELETED",
        "The store of this resource is deleted",
        status.HTTP_400_BAD_REQUEST,
    )
    PRODUCT_NOT_FOUND = ErrorDefinition(
        "PRODUCT_NOT_FOUND",
        "Product not found",
        status.HTTP_404_NOT_FOUND,
    )
    STORE_NOT_FOUND = ErrorDefinition(
        "STORE_NOT_FOUND",
        "Store not found",
        status.HTTP_404_NOT_FOUND,
    )
    CONCURRENT_MODIFICATION = ErrorDefinition(
        "CONCURRENT_MODIFICATION",
        "Resource was modified concurrently, re-read and retry",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
