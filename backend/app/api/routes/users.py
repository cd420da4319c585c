from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...api import deps
from ...core.errors import ErrorResponse, ValidationErrorResponse
from ...schemas.user import UserCreate, UserRead, UserUpdate
from ...services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])

_BAD_REQUEST = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse | ValidationErrorResponse,
        "description": "Invalid input",
    }
}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "User not found"}}


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    responses=_BAD_REQUEST,
)
def create_user(
    payload: UserCreate,
    service: UserService = Depends(deps.get_user_service),
) -> UserRead:
    return service.create_user(payload)


@router.get("", response_model=list[UserRead], summary="Get all users")
def list_users(service: UserService = Depends(deps.get_user_service)) -> list[UserRead]:
    return service.get_all_users()


@router.get(
    "/{id}",
    response_model=UserRead,
    summary="Get a user by ID",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def get_user(
    user_id: int = Depends(deps.user_id_path),
    service: UserService = Depends(deps.get_user_service),
) -> UserRead:
    return service.get_user(user_id)


@router.put(
    "/{id}",
    response_model=UserRead,
    summary="Update a user",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def update_user(
    payload: UserUpdate,
    user_id: int = Depends(deps.user_id_path),
    service: UserService = Depends(deps.get_user_service),
) -> UserRead:
    return service.update_user(user_id, payload)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def delete_user(
    user_id: int = Depends(deps.user_id_path),
    service: UserService = Depends(deps.get_user_service),
) -> Response:
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
