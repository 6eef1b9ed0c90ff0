# controller/auth_controller.py
from fastapi import APIRouter, Depends, Response, status
from controller.controller_dependencies import (
    authenticate,
    get_auth_service,
    rate_limiter,
)
from model.api import (
    CredentialsRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterResponse,
)
from model.user import PublicUser, User
from service.auth_service import AuthService
from util.constants import InternalURIs

auth_router = APIRouter(tags=["users"], dependencies=[Depends(rate_limiter)])


@auth_router.post(
    InternalURIs.REGISTER,
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: CredentialsRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    user = await service.register(payload.email, payload.password)
    return RegisterResponse(
        message="User created successfully", user=PublicUser.of(user)
    )


@auth_router.post(InternalURIs.LOGIN, response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    user, token = await service.login(payload.email, payload.password)
    return LoginResponse(
        message="Login successful", user=PublicUser.of(user), token=token
    )


@auth_router.post(InternalURIs.LOGOUT, response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    # Tokens are stateless; only a cookie copy can be dropped here.
    response.delete_cookie("token")
    return MessageResponse(message="Logout successful")


@auth_router.get(InternalURIs.ME, response_model=PublicUser)
async def me(user: User = Depends(authenticate)) -> PublicUser:
    return PublicUser.of(user)
