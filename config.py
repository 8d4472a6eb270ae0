from json import load
from logging import basicConfig, getLevelName
from os import getenv
from os.path import abspath, dirname, join

from dotenv import load_dotenv

# Charger les variables d'environnement
load_dotenv()

# Chemins
BASE_DIR = dirname(abspath(__file__))
TEMPLATES_DIR = join(BASE_DIR, "templates")

# Base de données
DATABASE_URL = getenv("DATABASE_URL", "sqlite:///./inventory.db")

# Seuil par défaut pour le stock bas (modifiable à chaque appel)
LOW_STOCK_THRESHOLD = int(getenv("LOW_STOCK_THRESHOLD", 5))

# Sécurité
SECRET_KEY = getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
ACCESS_TOKEN_COOKIE = "access_token"

# Comptes créés au démarrage s'ils n'existent pas
ADMIN_PASSWORD = getenv("ADMIN_PASSWORD", "admin123")
USER_PASSWORD = getenv("USER_PASSWORD", "user123")

# Middlewares
ALLOWED_HOSTS = [h.strip() for h in getenv("ALLOWED_HOSTS", "*").split(",") if h.strip()]
CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "http://localhost:8000").split(",") if o.strip()]

# Données de démonstration
SEED_DEMO_DATA = getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")

# Configuration du logger
LOG_LEVEL = getLevelName(getenv("LOG_LEVEL", "INFO").upper())
basicConfig(level=LOG_LEVEL)

# Chargement des messages d'erreur
with open(join(BASE_DIR, "errors.json"), "r", encoding="utf-8") as f:
    ERROR_MESSAGES = load(f)

def get_error_key(category, subcategory, error_type=None):
    """Fonction utilitaire pour obtenir les clés d'erreur"""
    if error_type:
        return f"{category}.{subcategory}.{error_type}"
    return f"{category}.{subcategory}"

def get_error_message(key: str, **kwargs) -> str:
    """Retourne le message associé à une clé d'erreur, formaté avec des paramètres."""
    text = ERROR_MESSAGES.get(key, key)
    try:
        return text.format(**kwargs)
    except KeyError:
        return text  # En cas de paramètre manquant, retourne la chaîne brute
