from fastapi import APIRouter, Depends, Request, status

from hackorsnooze.core.accounts import Accounts
from hackorsnooze.core.db.session import get_accounts
from hackorsnooze.core.rate_limit import limiter
from hackorsnooze.api.v0.auth.models import SignupRequest, AccountResponse

router = APIRouter()


@router.post("/signup", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def signup(
    request: Request,
    signup_request: SignupRequest,
    accounts: Accounts = Depends(get_accounts),
):
    """
    Create a new account.

    Rate limited to 5 requests per minute per IP.
    The password is stored as a bcrypt hash and the phone number, if given,
    in E.164 form.
    """
    user = accounts.create_account(
        username=signup_request.username,
        name=signup_request.name,
        password=signup_request.password,
        phone=signup_request.phone,
    )
    return AccountResponse.model_validate(user)
