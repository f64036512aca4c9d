from pydantic import BaseModel


class ApiErrorResponse(BaseModel):
    code: str
    message: str
    details: dict | None = None
    trace_id: str | None = None


class ApiValidationErrorItem(BaseModel):
    field: str | None = None
    message: str
    type: str
    loc: list[str | int] | None = None
    input: object | None = None
    ctx: dict | None = None


class ApiValidationErrorDetails(BaseModel):
    errors: list[ApiValidationErrorItem]


class ApiValidationErrorResponse(ApiErrorResponse):
    details: ApiValidationErrorDetails | dict | None = None


RESOURCE_ERROR_RESPONSES = {
    400: {"description": "Lifecycle state conflict", "model": ApiErrorResponse},
    401: {"description": "Missing, invalid or expired token", "model": ApiErrorResponse},
    403: {"description": "Role or tenant scope refused", "model": ApiErrorResponse},
    404: {"description": "Record not found", "model": ApiErrorResponse},
    409: {"description": "Record changed by another request", "model": ApiErrorResponse},
    422: {"description": "Validation error", "model": ApiValidationErrorResponse},
}
