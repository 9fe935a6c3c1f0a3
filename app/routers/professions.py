from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.dependencies import get_current_user_id
from app.schemas.profession import (
    ErrorResponse,
    ProfessionListResponse,
    ProfessionRead,
    ProfessionResponse,
    ProfessionUpdateResponse,
)
from app.services.profession_service import create_profession, find_professions_by_service, update_own_profession


router = APIRouter(
    prefix="/professions",
    tags=["professions"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


# Bodies are taken as plain JSON so the service sees exactly which keys were sent.
@router.post("", response_model=ProfessionResponse, status_code=status.HTTP_201_CREATED)
def add_profession(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_current_user_id),
) -> ProfessionResponse:
    profession = create_profession(db, user_id, payload)
    return ProfessionResponse(data=ProfessionRead.model_validate(profession))


@router.get("", response_model=ProfessionListResponse)
def get_professionals_by_service(
    service_name: str | None = Query(default=None, alias="serviceName"),
    db: Session = Depends(get_db),
) -> ProfessionListResponse:
    professions = find_professions_by_service(db, service_name)
    return ProfessionListResponse(data=[ProfessionRead.model_validate(p) for p in professions])


@router.put("/me", response_model=ProfessionUpdateResponse, responses={404: {"model": ErrorResponse}})
def update_my_profession(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_current_user_id),
) -> ProfessionUpdateResponse:
    profession = update_own_profession(db, user_id, payload)
    return ProfessionUpdateResponse(data=ProfessionRead.model_validate(profession))
