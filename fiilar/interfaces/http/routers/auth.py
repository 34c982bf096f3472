"""Registration, login and profile endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from fiilar.core.config import get_settings
from fiilar.core.security import create_access_token, get_current_account
from fiilar.interfaces.http.deps import get_account_service
from fiilar.modules.accounts import (
    Account as AccountDomain,
    AccountAlreadyExistsError,
    AccountCreateInput,
    AccountService,
)
from fiilar.schemas import AccountCreate, AccountLoginResponse, AccountResponse, LoginRequest

router = APIRouter()


def _ws_url(request: Request, token: str) -> str:
    host_header = request.headers.get("host", f"localhost:{get_settings().port}")
    scheme = "ws"
    if request.headers.get("x-forwarded-proto") == "https":
        scheme = "wss"
    return f"{scheme}://{host_header}/ws?token={token}"


def _login_response(request: Request, account: AccountDomain) -> AccountLoginResponse:
    access_token = create_access_token(account.id, account.username, account.role)
    return AccountLoginResponse(
        access_token=access_token,
        account_id=account.id,
        username=account.username,
        role=account.role,
        ws_url=_ws_url(request, access_token),
    )


@router.post(
    "/register",
    response_model=AccountLoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a guest or host account",
)
async def register(
    payload: AccountCreate,
    request: Request,
    account_service: AccountService = Depends(get_account_service),
) -> AccountLoginResponse:
    try:
        account = await account_service.create_account(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                role=payload.role,
                email=payload.email,
            )
        )
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists") from exc
    return _login_response(request, account)


@router.post("/login", response_model=AccountLoginResponse, summary="Exchange credentials for a bearer token")
async def login(
    payload: LoginRequest,
    request: Request,
    account_service: AccountService = Depends(get_account_service),
) -> AccountLoginResponse:
    account = await account_service.authenticate(payload.username, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    await account_service.set_last_login(account.id)
    return _login_response(request, account)


@router.get("/me", response_model=AccountResponse, summary="Current account profile")
async def me(account: AccountDomain = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)
