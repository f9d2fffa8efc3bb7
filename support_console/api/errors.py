"""Map console errors onto HTTP errors."""

from fastapi import HTTPException

from ..errors import ConsoleError, InvalidInputError, SessionNotReadyError


def to_http_error(error: ConsoleError) -> HTTPException:
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, SessionNotReadyError):
        return HTTPException(status_code=409, detail=str(error))
    # Upstream failures: chat API, push channel
    return HTTPException(status_code=502, detail=str(error))
