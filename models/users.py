from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.orm import Session

from config import ADMIN_PASSWORD, USER_PASSWORD
from utils.security import hash_passw, verify_passw
from .base import Base, save_to_db

class Role(str, Enum):
    ADMIN = "ADMIN"   # Lecture et modification du catalogue
    USER = "USER"     # Lecture seule

# ✅ Modèle User
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    password = Column(String(128), nullable=False)
    role = Column(String(16), default=Role.USER.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))  # Toujours stocké en UTC
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"

    # Sauvegarde de l'utilisateur en base
    def save_user(self, db: Session):
        """Ajoute l'utilisateur en base de données après hachage du mot de passe."""
        self.password = hash_passw(self.password)
        save_to_db(self, db)

    # Vérifier le mot de passe
    def verify_password(self, plain_password: str) -> bool:
        return verify_passw(plain_password, self.password)

    def touch_login(self, db: Session):
        self.last_login = datetime.now(timezone.utc)
        db.commit()

def insert_default_users(db: Session):
    users = [
        {"username": "admin", "password": ADMIN_PASSWORD, "role": Role.ADMIN.value},
        {"username": "user", "password": USER_PASSWORD, "role": Role.USER.value},
    ]

    for user in users:
        existing_user = db.query(User).filter(User.username == user["username"]).first()
        if not existing_user:
            User(**user).save_user(db)
