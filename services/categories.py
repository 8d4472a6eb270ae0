import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import get_error_key
from models import Category, ProductCategory, save_to_db, update_to_db, delete_from_db
from schemas.categories import CategoryResponse
from .errors import DuplicateNameError, InvalidValueError, NotFoundError

logger = logging.getLogger(__name__)


class CategoryService:
    """Cycle de vie des catégories et unicité (insensible à la casse) de leur nom."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str) -> CategoryResponse:
        name = self._clean_name(name, "create")
        if self._name_taken(name):
            raise DuplicateNameError(get_error_key("categories", "create", "already_exists"), name=name)

        category = Category(name=name)
        save_to_db(category, self.db)
        logger.info(f"Catégorie créée : {category.id} ({category.name})")
        return self._to_response(category, product_count=0)

    def list(self) -> List[CategoryResponse]:
        rows = (
            self.db.query(Category, func.count(ProductCategory.id))
            .outerjoin(ProductCategory, ProductCategory.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
            .all()
        )
        return [self._to_response(category, product_count=count) for category, count in rows]

    def get_by_id(self, id: int) -> CategoryResponse:
        return self._to_response(self.find_by_id(id))

    def find_by_id(self, id: int) -> Category:
        """Renvoie l'entité, utilisé aussi par ProductService."""
        category = self.db.query(Category).filter(Category.id == id).first()
        if not category:
            raise NotFoundError(get_error_key("categories", "get", "not_found"), id=id)
        return category

    def update(self, id: int, new_name: str) -> CategoryResponse:
        category = self.find_by_id(id)
        new_name = self._clean_name(new_name, "update")

        # Renommer une catégorie en elle-même (quelle que soit la casse) est permis
        if category.name.lower() != new_name.lower() and self._name_taken(new_name, exclude_id=category.id):
            raise DuplicateNameError(get_error_key("categories", "update", "already_exists"), name=new_name)

        category.name = new_name
        update_to_db(category, self.db)
        logger.info(f"Catégorie renommée : {category.id} ({category.name})")
        return self._to_response(category)

    def delete(self, id: int) -> None:
        category = self.find_by_id(id)
        # Les associations sont supprimées en cascade
        delete_from_db(category, self.db)
        logger.info(f"Catégorie supprimée : {id}")

    def _name_taken(self, name: str, exclude_id: int = None) -> bool:
        query = self.db.query(Category.id).filter(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    def _clean_name(self, name: str, action: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidValueError(get_error_key("categories", action, "blank_name"))
        return name

    def _to_response(self, category: Category, product_count: int = None) -> CategoryResponse:
        if product_count is None:
            product_count = (
                self.db.query(func.count(ProductCategory.id))
                .filter(ProductCategory.category_id == category.id)
                .scalar()
            )
        return CategoryResponse(id=category.id, name=category.name, product_count=product_count)
