from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, status, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from framework.config import settings
from framework.exceptions.handler import BusinessException
from framework.response import ResponseState

# 1. Password hashing (BCrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. OAuth2 scheme and token URL
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_AUTH_PREFIX}/login", auto_error=False)

ALGORITHM = "HS256"

# System role ids seeded by the initial migration
ADMIN_ROLE_ID = 1
FACILITY_ROLE_ID = 2
STAFF_ROLE_ID = 3
EXPLORE_ROLE_ID = 4

# --- Core models ---

class CurrentUser(BaseModel):
    """Current logged-in user context"""
    id: str
    email: str
    name: str
    system_role_id: int

    @property
    def is_admin(self) -> bool:
        return self.system_role_id == ADMIN_ROLE_ID

# --- Helpers ---

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def token_claims(user_id: str, email: str, name: str, system_role_id: int) -> dict:
    return {"sub": user_id, "email": email, "name": name, "role": system_role_id}

# --- FastAPI dependencies ---

def get_token_from_request(
    request: Request,
    token_from_header: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    """
    Get token from request: prefer cookie, then Authorization header.
    """
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    if not token and token_from_header:
        token = token_from_header
    return token

def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_token_from_request)
) -> CurrentUser:
    """
    Dependency: validate token and extract user. Use in router as user: CurrentUser = Depends(get_current_user).

    The user id is also stored on request.state so audit stamping can find it.
    """
    credentials_exception = BusinessException(
        "Could not validate credentials",
        status_code=status.HTTP_401_UNAUTHORIZED,
        state=ResponseState.UNAUTHORIZED,
    )

    if not token:
        raise credentials_exception

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not user_id or not email or role is None:
        raise credentials_exception

    request.state.user_id = user_id
    return CurrentUser(
        id=user_id,
        email=email,
        name=payload.get("name") or "",
        system_role_id=int(role),
    )

def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency: only system administrators pass."""
    if not user.is_admin:
        raise BusinessException(
            "Administrator role required",
            status_code=status.HTTP_403_FORBIDDEN,
            state=ResponseState.FORBIDDEN,
        )
    return user
