import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from config import DATABASE_URL

logger = logging.getLogger(__name__)

def build_engine(url: str) -> Engine:
    """Crée le moteur SQLAlchemy adapté au type de base."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    # Configuration du pool de connexions pour les bases serveur
    return create_engine(
        url,
        pool_size=20,            # Gérer les pics de trafic
        max_overflow=40,
        pool_timeout=90,         # Temps d'attente avant échec de la connexion
        pool_recycle=300,        # Recycle les connexions inactives
        pool_pre_ping=True,      # Vérifie que la connexion est active
    )

# SQLite n'applique les clés étrangères (et donc ON DELETE CASCADE) que sur demande
@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine: Engine = build_engine(DATABASE_URL)

# Initialisation de la session et du base model
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

# Dépendance FastAPI : une session par requête
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_db_context():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Sauvegarde dans la db avec gestion d'erreur
def save_to_db(self, db: Session):
    try:
        db.add(self)
        db.commit()
        db.refresh(self)
    except Exception as e:
        db.rollback()
        logger.error(f"Erreur lors de la sauvegarde : {e}")
        raise e

def update_to_db(self, db: Session):
    try:
        db.commit()
        db.refresh(self)
    except Exception as e:
        db.rollback()
        logger.error(f"Erreur lors de la mise à jour : {e}")
        raise e

# Suppression de la db avec gestion d'erreur
def delete_from_db(self, db: Session):
    try:
        db.delete(self)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Erreur lors de la suppression : {e}")
        raise e

# Suppression de plusieurs lignes en un seul commit
def delete_all_from_db(items, db: Session):
    try:
        for item in items:
            db.delete(item)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Erreur lors de la suppression groupée : {e}")
        raise e
