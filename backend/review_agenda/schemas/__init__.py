from review_agenda.schemas.common import ErrorResponse

__all__ = ["ErrorResponse"]
