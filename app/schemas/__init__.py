from app.schemas.common_schema import MessageResponse, ValidationErrorResponse

__all__ = ["MessageResponse", "ValidationErrorResponse"]
