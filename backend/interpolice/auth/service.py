"""
Authentication Service

Password hashing (bcrypt) and access token issue/verification (PyJWT,
HS256 with the JWT_SECRET environment variable).
"""

import logging
import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from sqlalchemy.orm import Session

from interpolice.config import get_config
from interpolice.database.models import Role, User
from interpolice.errors import AuthenticationError, ConflictError, NotFoundError


logger = logging.getLogger(__name__)


class AuthService:
    """
    Token and password service

    Tokens carry the claims id, username, role and email.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        expiry_hours: Optional[int] = None,
        bcrypt_rounds: Optional[int] = None
    ):
        auth_config = get_config().get_auth_config()

        self.secret = secret or os.getenv("JWT_SECRET") or self._generate_dev_secret()
        self.algorithm = auth_config.get('algorithm', 'HS256')
        self.expiry_hours = expiry_hours or auth_config.get('tokenExpiryHours', 24)
        self.bcrypt_rounds = bcrypt_rounds or auth_config.get('bcryptRounds', 12)

    @staticmethod
    def _generate_dev_secret() -> str:
        logger.warning("No JWT_SECRET found, generating an ephemeral development secret")
        return secrets.token_urlsafe(32)

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify_password(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    def create_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'id': user.id,
            'username': user.username,
            'role': user.role.role_name,
            'email': user.user_email,
            'iat': now,
            'exp': now + timedelta(hours=self.expiry_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token

        Raises:
            AuthenticationError: token is expired, malformed or badly signed
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={'require': ['exp', 'id', 'role']},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid token") from e
        return payload

    def authenticate(self, db: Session, username: str, password: str) -> User:
        """Return the user for valid credentials"""
        user = db.query(User).filter(User.username == username).first()
        if user is None or not self.verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        return user

    def create_user(self, db: Session, username: str, password: str, email: str, role_name: str) -> User:
        """Create an operator account (caller commits)"""
        role = db.query(Role).filter(Role.role_name == role_name).first()
        if role is None:
            raise NotFoundError("Role", role_name)
        if db.query(User.id).filter(User.username == username).first():
            raise ConflictError(f"Username '{username}' is already taken")
        if db.query(User.id).filter(User.user_email == email).first():
            raise ConflictError(f"Email '{email}' is already registered")

        user = User(
            username=username,
            password_hash=self.hash_password(password),
            role_id=role.id,
            user_email=email,
        )
        db.add(user)
        db.flush()
        db.refresh(user)

        logger.info("User %s created with role %s", username, role_name)
        return user


# Global instance
_auth_service: Optional[AuthService] = None


def init_auth_service(secret: Optional[str] = None, **kwargs) -> AuthService:
    """Initialize global auth service"""
    global _auth_service
    _auth_service = AuthService(secret, **kwargs)
    return _auth_service


def get_auth_service() -> AuthService:
    """Get global auth service (created on first use)"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
