from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas.user_schema import UserRead, UserRegister
from app.services.user.exceptions import UserAlreadyExists
from app.services.user.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register the owner of the identity token",
)
async def register_user(
    *,
    register_form: UserRegister,
    user_service: UserService = Depends(UserService.get_dependency),
):
    try:
        new_user = await user_service.register_current_user(register_form)
    except UserAlreadyExists as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return UserRead.model_validate(new_user)


@router.get("/me", response_model=UserRead, summary="Get the current user")
async def get_me(
    *,
    user_service: UserService = Depends(UserService.get_dependency),
):
    current_user = await user_service.get_current_user()
    return UserRead.model_validate(current_user)
