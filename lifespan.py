import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from config import SEED_DEMO_DATA
from models import insert_default_users, insert_demo_catalog, get_db_context

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    with get_db_context() as db:
        # Insertions initiales
        insert_default_users(db)
        if SEED_DEMO_DATA:
            insert_demo_catalog(db)

    logger.info("Application prête")
    yield  # Exécution normale de l'app
    logger.info("Arrêt de l'application")
