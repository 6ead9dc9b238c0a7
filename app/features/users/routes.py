"""
User and authentication routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, status

from app.core import config
from app.core.limiter import limiter, get_remote_address
from app.core.schemas import ApiResponse
from app.features.permissions.dependencies import get_access_context, get_client_info
from app.features.permissions.engine import AccessContext
from app.features.users.dependencies import get_current_user, get_user_service
from app.features.users.models import User
from app.features.users.schemas import LoginRequest, LoginResponse, UserCreate, UserRegister, UserResponse
from app.features.users.services import UserService


router = APIRouter(tags=["users"])
auth_router = APIRouter(tags=["auth"])


@auth_router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a Viewer account in an existing organization."""
    user = await service.register(user_data)
    return ApiResponse(data=UserResponse.model_validate(user), message="User registered successfully")


@auth_router.post("/login", response_model=ApiResponse[LoginResponse])
@limiter.limit(config.LOGIN_RATE_LIMIT, key_func=get_remote_address)
async def login(
    request: Request,
    credentials: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Exchange email and password for an access token."""
    result = await service.login(credentials)
    return ApiResponse(data=result, message="Login successful")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_current_user_profile(
    user: Annotated[User, Depends(get_current_user)]
):
    """Get current authenticated user's profile."""
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post("/", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Create a user with a role in the caller's organization or a child organization."""
    user = await service.create_user(ctx, user_data, get_client_info(request))
    return ApiResponse(data=UserResponse.model_validate(user), message="User created successfully")
