"""Shared route helpers."""

from typing import Type, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from folklore_admin.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def get_or_404(db: Session, model: Type[ModelT], obj_id: int, label: str = "") -> ModelT:
    """Load a row by primary key or answer 404."""
    obj = db.get(model, obj_id)
    if obj is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label or model.__name__} not found",
        )
    return obj


def bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def conflict(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
