from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from jwt import ExpiredSignatureError, PyJWTError
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from config import (SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, ACCESS_TOKEN_COOKIE,
                    get_error_key, get_error_message)

ph = PasswordHasher()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)

# ✅ Fonction pour générer un token JWT
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Décode le token et renvoie l'utilisateur courant. Lève ValueError si invalide."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise ValueError("Token expired")
    except PyJWTError as e:
        raise ValueError(f"Invalid token: {str(e)}")

    username = payload.get("sub")
    role = payload.get("role")
    if username is None or role is None:
        raise ValueError("Invalid token - missing claims")
    return {"username": username, "role": role}

def _unauthorized(error_type: str) -> HTTPException:
    key = get_error_key("auth", "token", error_type)
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=get_error_message(key),
        headers={"WWW-Authenticate": "Bearer"},
    )

# Dépendance pour l'API JSON : token Bearer obligatoire
def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    if not token:
        raise _unauthorized("missing")
    try:
        return decode_access_token(token)
    except ValueError:
        raise _unauthorized("invalid")

def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user["role"] != "ADMIN":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=get_error_message(get_error_key("auth", "role", "forbidden")),
        )
    return current_user

# Dépendances pour les pages HTML : token dans un cookie, sinon redirection vers /login
def get_page_user(request: Request) -> dict:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        try:
            return decode_access_token(token)
        except ValueError:
            pass
    raise HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": "/login"})

def require_page_admin(current_user: dict = Depends(get_page_user)) -> dict:
    if current_user["role"] != "ADMIN":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=get_error_message(get_error_key("auth", "role", "forbidden")),
        )
    return current_user

#✅ Hasher le mot de passe
def hash_passw(password: str) -> str:
    return ph.hash(password)

#✅ Vérifier un mot de passe
def verify_passw(password: str, hashed_password: str) -> bool:
    try:
        return ph.verify(hashed_password, password)
    except (VerificationError, InvalidHashError):
        return False
