"""Translate service result dicts into HTTP errors."""

from fastapi import HTTPException, status

_STATUS_CODES: dict[str, int] = {
    "invalid": status.HTTP_400_BAD_REQUEST,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "already_exists": status.HTTP_409_CONFLICT,
}


def raise_for_status(result: dict[str, object]) -> dict[str, object]:
    """Raise ``HTTPException`` for failed results; return successful ones as-is."""

    code = _STATUS_CODES.get(str(result.get("status")))
    if code is not None:
        raise HTTPException(status_code=code, detail=str(result.get("message", "")))
    return result


def not_found(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
