from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.middleware.cors import CORSMiddleware

from config import ALLOWED_HOSTS, CORS_ORIGINS
from lifespan import lifespan
from api import *
from api.errors import register_exception_handlers
from models import Base, engine

Base.metadata.create_all(bind=engine)

# Création de l'application FastAPI
app = FastAPI(title="Inventory", lifespan=lifespan)

# Ajout des middlewares à l'application
app.add_middleware(TrustedHostMiddleware, allowed_hosts=ALLOWED_HOSTS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
    ]
)

# Conversion des erreurs métier et inattendues en réponses JSON ou HTML
register_exception_handlers(app)

# Inclusion des routes API (JSON)
app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(categories.router, prefix="/api", tags=["Categories"])
app.include_router(products.router, prefix="/api", tags=["Products"])

# Pages HTML
app.include_router(pages.router, tags=["Pages"], include_in_schema=False)
app.include_router(category_pages.router, tags=["Pages"], include_in_schema=False)
app.include_router(product_pages.router, tags=["Pages"], include_in_schema=False)

@app.head("/health")
@app.get("/health")
def health():
    return {"message": "API is running"}

# Lancer le serveur Uvicorn
import uvicorn
if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
