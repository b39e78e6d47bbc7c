from fastapi import APIRouter, Depends

from api.deps import get_auth_service, get_current_identity, get_user_repo
from api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from unida.database.user_repository import UserRepository
from unida.exceptions import NotFound
from unida.model.user import Identity
from unida.service.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account and return it with a fresh token."""
    user, token = auth.register(
        name=body.name,
        email=body.email,
        password=body.password,
        institution=body.institution,
    )
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    user, token = auth.login(body.email, body.password)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@router.get("/me", response_model=UserResponse)
def me(
    identity: Identity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repo),
):
    """Current user, as named by the bearer token."""
    user = users.get_by_id(identity.id)
    if not user:
        raise NotFound("User not found")
    return UserResponse.from_user(user)
