from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from typing import Generator
from sqlalchemy.orm import sessionmaker, Session

from hackorsnooze.core.accounts import Accounts
from hackorsnooze.core.db.engine import engine
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.core.sms import SmsSender, get_sms_sender

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

basic_auth = HTTPBasic()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_accounts(
    session: Session = Depends(get_db),
    sms_sender: SmsSender | None = Depends(get_sms_sender),
) -> Accounts:
    return Accounts(session, sms_sender=sms_sender)


def get_current_user(
    credentials: HTTPBasicCredentials = Depends(basic_auth),
    accounts: Accounts = Depends(get_accounts),
) -> User:
    """Dependency to authenticate a user via HTTP Basic credentials"""
    return accounts.authenticate(credentials.username, credentials.password)
