"""
User accounts: registration and password login.

Only a werkzeug password hash is stored. Lookup failures and wrong passwords
raise the same InvalidCredentials error so callers cannot tell which emails
are registered.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from tripai.errors import Conflict, InvalidCredentials, Unauthenticated, ValidationError
from tripai.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountStore:
    def __init__(self, db: Session):
        self.db = db

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
        name = (name or "").strip()
        email = _normalize_email(email or "")
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )

        if self.db.query(User.id).filter(User.email == email).first():
            logger.info("Registration rejected: email already registered")
            raise Conflict()

        user = User(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            logger.info("Registration rejected: email registered concurrently")
            raise Conflict()
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.db.query(User).filter(User.email == _normalize_email(email)).first()
        if user is None or not check_password_hash(user.password_hash, password):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()

        return user

    def get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            # Token outlived its account
            raise Unauthenticated()
        return user
