from datetime import timedelta
from fastapi import APIRouter, Depends, Response
from framework.config import settings
from framework.dependencies import get_uow
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, create_access_token, get_current_user, token_claims
from apps.mappers import mapper
from ..schemas import LoginSchema, ResendVerificationSchema, UserDto
from ..service import IdentityService, UserService

router = APIRouter()

def get_identity_service(uow: UnitOfWork = Depends(get_uow)) -> IdentityService:
    """Dependency: create IdentityService."""
    return IdentityService(uow)

@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: IdentityService = Depends(get_identity_service)
):
    """Login: return JWT and set cookie."""
    user = await service.authenticate(data.email, data.password)
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data=token_claims(user.id, user.email, user.name, user.system_role_id),
        expires_delta=expires_delta
    )

    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=int(expires_delta.total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )

    return ResponseModel.success(
        data={
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": int(expires_delta.total_seconds()),
            "user": mapper.map(user, UserDto),
        },
        message="Login successful"
    )

@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(message="Logged out successfully")

@router.get("/me")
async def me(
    user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow)
):
    """Profile of the signed-in user."""
    entity = await UserService(uow).get_user(user.id)
    if entity is None:
        return ResponseModel.success(data=user.model_dump())
    return ResponseModel.success(data=mapper.map(entity, UserDto))

@router.get("/verify-email")
async def verify_email(token: str, service: IdentityService = Depends(get_identity_service)):
    await service.verify_email(token)
    return ResponseModel.success(message="Email verified successfully. You can now log in.")

@router.post("/resend-verification")
async def resend_verification(
    data: ResendVerificationSchema,
    service: IdentityService = Depends(get_identity_service)
):
    await service.resend_verification(data.email)
    return ResponseModel.success(message="Verification email resent.")
