from fastapi import APIRouter, Depends, Request, status

from hackorsnooze.core.accounts import Accounts
from hackorsnooze.core.db.session import get_accounts, get_current_user
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.core.errors import NotAccountOwner
from hackorsnooze.core.logger import get_logger
from hackorsnooze.core.rate_limit import limiter
from hackorsnooze.api.v0.auth.models import AccountResponse
from hackorsnooze.api.v0.user.models import (
    AccountDetailResponse,
    AccountUpdate,
    MessageResponse,
    RecoveryRedeemRequest,
    get_detail_response,
)

router = APIRouter(prefix="/users")
logger = get_logger(__name__)

RECOVERY_ACK = "Request Acknowledged."


def ensure_account_owner(current_user: User, username: str) -> None:
    if current_user.username != username:
        raise NotAccountOwner()


@router.get("/{username}", response_model=AccountDetailResponse)
def get_user(
    username: str,
    accounts: Accounts = Depends(get_accounts),
):
    """Get a user with the stories they posted and their favorites"""
    return get_detail_response(accounts.get_account_detail(username))


@router.patch("/{username}", response_model=AccountResponse)
def patch_user(
    username: str,
    update: AccountUpdate,
    current_user: User = Depends(get_current_user),
    accounts: Accounts = Depends(get_accounts),
):
    """
    Update name, password and/or phone.

    Changing the name also renames the author of every story the user posted.
    """
    ensure_account_owner(current_user, username)
    user = accounts.patch_account(username, update.model_dump(exclude_unset=True))
    return AccountResponse.model_validate(user)


@router.delete("/{username}")
def delete_user(
    username: str,
    current_user: User = Depends(get_current_user),
    accounts: Accounts = Depends(get_accounts),
):
    ensure_account_owner(current_user, username)
    detail = accounts.delete_account(username)
    return {
        "message": f"User '{username}' successfully deleted.",
        "user": get_detail_response(detail),
    }


@router.post(
    "/{username}/recovery",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@limiter.limit("3/minute")
def request_recovery_code(
    request: Request,
    username: str,
    accounts: Accounts = Depends(get_accounts),
):
    """
    Text a recovery code to the phone on file.

    Rate limited to 3 requests per minute per IP.
    The answer is the same whether or not the user exists or has a phone,
    so this endpoint cannot be used to discover accounts.
    """
    accounts.initiate_recovery(username)
    return MessageResponse(message=RECOVERY_ACK)


@router.put("/{username}/recovery", response_model=MessageResponse)
@limiter.limit("5/minute")
def redeem_recovery_code(
    request: Request,
    username: str,
    redeem_request: RecoveryRedeemRequest,
    accounts: Accounts = Depends(get_accounts),
):
    """
    Set a new password using the code from the recovery SMS.

    Rate limited to 5 requests per minute per IP.
    Each code works once and only within its expiry window.
    """
    accounts.redeem_recovery(username, redeem_request.code, redeem_request.password)
    return MessageResponse(message="Password successfully reset.")
