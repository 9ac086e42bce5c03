from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ValidationErrorResponse(BaseModel):
    detail: str = "Validation failed"
    errors: dict[str, list[str]]
