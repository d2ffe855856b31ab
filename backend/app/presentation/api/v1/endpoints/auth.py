"""Register and login endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.application.services import AuthService
from app.domain.exceptions import InvalidCredentialsError
from app.infrastructure.dependencies import get_auth_service
from app.presentation.api.v1.endpoints.errors import store_errors

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user; username and email must be unused."""
    with store_errors():
        user = await service.register(data.username, data.password, data.email)
    return AuthResponse(
        message="User registered",
        user=UserResponse.model_validate(user.to_dict()),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Check a username/password pair against the stored hash."""
    try:
        with store_errors():
            user = await service.login(data.username, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.reason)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user.to_dict()),
    )
