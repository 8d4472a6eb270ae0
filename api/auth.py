import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from config import get_error_key, get_error_message
from models import User, get_db
from schemas.auth import Token
from utils.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()

def authenticate(db: Session, username: str, password: str):
    """Renvoie l'utilisateur actif correspondant aux identifiants, sinon None."""
    user = db.query(User).filter(User.username == username).first()
    if not user or not user.is_active or not user.verify_password(password):
        return None
    user.touch_login(db)
    return user

def token_for(user: User) -> str:
    return create_access_token({"sub": user.username, "role": user.role})

# ✅ Connexion : renvoie un token Bearer pour l'API
@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = authenticate(db, form_data.username, form_data.password)
    if not user:
        logger.warning(f"Échec de connexion pour {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=get_error_message(get_error_key("auth", "login", "invalid_credentials")),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=token_for(user))
