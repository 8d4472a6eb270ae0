from fastapi import Depends
from sqlalchemy.orm import Session

from config import LOW_STOCK_THRESHOLD
from models import get_db
from .errors import *
from .categories import CategoryService
from .products import ProductService

# Dépendances FastAPI : les services sont recréés à chaque requête avec sa session
def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)

def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db, CategoryService(db), low_stock_threshold=LOW_STOCK_THRESHOLD)

__all__ = ["CategoryService", "ProductService", "get_category_service", "get_product_service",
           "ErrorKind", "DomainError", "NotFoundError", "DuplicateNameError", "InvalidValueError",
           "AlreadyAssociatedError", "NotAssociatedError"]
