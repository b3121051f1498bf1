"""FastAPI routes for the Identity domain — sessions, the signed-in profile and admin user management."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from identity.api.schemas import (
    BlockUserRequest,
    LoginRequest,
    ProfileResponse,
    RegisterUserRequest,
    RoleResponse,
    StatusResponse,
    TokenResponse,
    UpdateProfileRequest,
    UserIdResponse,
    UserListResponse,
    VerifyResponse,
)
from identity.user.administration import BlockUser, ToggleUserRole, UnblockUser
from identity.user.authentication import AccountBlocked, InvalidCredentials, authenticate
from identity.user.directory import list_users
from identity.user.profile import UpdateProfile
from identity.user.registration import register_user
from identity.user.user import User
from shared.auth import (
    TokenClaims,
    clear_auth_cookie,
    current_claims,
    issue_token,
    require_admin,
    set_auth_cookie,
)

# ---------------------------------------------------------------------------
# Session Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/api", tags=["auth"])


@auth_router.post("/register", status_code=201, response_model=UserIdResponse)
async def register(body: RegisterUserRequest) -> UserIdResponse:
    user_id = register_user(
        username=body.username,
        email=body.email,
        password=body.password,
        name=body.name,
    )
    return UserIdResponse(user_id=user_id)


@auth_router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest):
    try:
        claims = authenticate(body.username, body.password)
    except InvalidCredentials as exc:
        raise HTTPException(status_code=401, detail="Invalid credentials") from exc
    except AccountBlocked as exc:
        raise HTTPException(status_code=403, detail="Account is blocked") from exc

    token = issue_token(claims["user_id"], claims["username"], claims["role"])
    response = JSONResponse(content={"token": token})
    set_auth_cookie(response, token)
    return response


@auth_router.get("/verify", response_model=VerifyResponse)
async def verify(claims: TokenClaims = Depends(current_claims)) -> VerifyResponse:
    return VerifyResponse(userId=claims.user_id, username=claims.username, role=claims.role)


@auth_router.post("/logout", response_model=StatusResponse)
async def logout():
    response = JSONResponse(content={"status": "ok"})
    clear_auth_cookie(response)
    return response


# ---------------------------------------------------------------------------
# Profile Router
# ---------------------------------------------------------------------------
profile_router = APIRouter(prefix="/api/profile", tags=["profile"])


@profile_router.get("", response_model=ProfileResponse)
async def get_profile(claims: TokenClaims = Depends(current_claims)) -> ProfileResponse:
    user = current_domain.repository_for(User).get(claims.user_id)
    return ProfileResponse(**user.to_profile_dict())


@profile_router.put("", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    claims: TokenClaims = Depends(current_claims),
) -> ProfileResponse:
    command = UpdateProfile(user_id=claims.user_id, name=body.name, email=body.email)
    profile = current_domain.process(command, asynchronous=False)
    return ProfileResponse(**profile)


# ---------------------------------------------------------------------------
# Admin Users Router
# ---------------------------------------------------------------------------
admin_users_router = APIRouter(prefix="/api/admin/users", tags=["admin"])


@admin_users_router.get("", response_model=UserListResponse)
async def get_users(
    q: str = "",
    blocked: str = Query("all", pattern="^(all|blocked|active)$"),
    sort: str = "created_at",
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    _admin: TokenClaims = Depends(require_admin),
) -> UserListResponse:
    return UserListResponse(**list_users(search=q, blocked=blocked, sort=sort, direction=direction, page=page))


@admin_users_router.patch("/{user_id}/block", response_model=StatusResponse)
async def set_blocked(
    user_id: str,
    body: BlockUserRequest,
    admin: TokenClaims = Depends(require_admin),
) -> StatusResponse:
    if user_id == admin.user_id:
        raise HTTPException(status_code=400, detail="You cannot block your own account")

    command = BlockUser(user_id=user_id) if body.blocked else UnblockUser(user_id=user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_users_router.patch("/{user_id}/role", response_model=RoleResponse)
async def toggle_role(user_id: str, admin: TokenClaims = Depends(require_admin)) -> RoleResponse:
    if user_id == admin.user_id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")

    role = current_domain.process(ToggleUserRole(user_id=user_id), asynchronous=False)
    return RoleResponse(role=role)
