# backend/utils/errors.py
from fastapi import HTTPException

from services.exceptions import StoreError


def to_http(exc: StoreError) -> HTTPException:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return HTTPException(status_code=exc.status_code, detail=exc.message, headers=headers)
