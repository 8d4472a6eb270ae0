import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import get_error_key
from models import Category, Product, ProductCategory, save_to_db, update_to_db, delete_from_db, delete_all_from_db
from schemas.products import MAX_PRICE, MAX_STOCK, ProductResponse
from .categories import CategoryService
from .errors import AlreadyAssociatedError, InvalidValueError, NotAssociatedError, NotFoundError

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class ProductService:
    """Règles métier des produits : prix, stock, associations et agrégats.

    Chaque écriture est validée (commit) séparément. Une mise à jour complète
    supprime puis recrée les associations du produit en plusieurs commits :
    deux mises à jour concurrentes du même produit peuvent donc s'entrelacer
    et la dernière écriture l'emporte (limitation connue, non protégée).
    """

    def __init__(self, db: Session, categories: CategoryService, low_stock_threshold: int):
        self.db = db
        self.categories = categories
        self._low_stock_threshold = low_stock_threshold

    @property
    def low_stock_threshold(self) -> int:
        return self._low_stock_threshold

    # ------------------------------------------------------------------
    # Création / lecture
    # ------------------------------------------------------------------

    def create(self, name: str, description: Optional[str], price, stock: int,
               category_ids: Optional[Iterable[int]] = None) -> ProductResponse:
        name = self._clean_name(name, "create")
        price = self._check_price(price)
        stock = self._check_stock(stock)
        # Toutes les catégories sont résolues avant la moindre écriture
        categories = self._resolve_categories(category_ids)

        product = Product(name=name, description=description, price=price, stock=stock)
        save_to_db(product, self.db)
        self._link_categories(product, categories)
        logger.info(f"Produit créé : {product.id} ({product.name})")
        return self.to_response(product)

    def list(self) -> List[ProductResponse]:
        return [self.to_response(p) for p in self.db.query(Product).all()]

    def get_by_id(self, id: int) -> ProductResponse:
        return self.to_response(self.find_by_id(id))

    def find_by_id(self, id: int) -> Product:
        product = self.db.query(Product).filter(Product.id == id).first()
        if not product:
            raise NotFoundError(get_error_key("products", "get", "not_found"), id=id)
        return product

    def search_by_name(self, fragment: str) -> List[ProductResponse]:
        products = (
            self.db.query(Product)
            .filter(func.lower(Product.name).contains((fragment or "").lower(), autoescape=True))
            .order_by(Product.name.asc())
            .all()
        )
        return [self.to_response(p) for p in products]

    def search_by_category(self, fragment: str) -> List[ProductResponse]:
        # Sous-requête : un produit lié à plusieurs catégories correspondantes n'apparaît qu'une fois
        matching_ids = (
            self.db.query(ProductCategory.product_id)
            .join(Category, Category.id == ProductCategory.category_id)
            .filter(func.lower(Category.name).contains((fragment or "").lower(), autoescape=True))
        )
        products = (
            self.db.query(Product)
            .filter(Product.id.in_(matching_ids.scalar_subquery()))
            .order_by(Product.name.asc())
            .all()
        )
        return [self.to_response(p) for p in products]

    # ------------------------------------------------------------------
    # Modification / suppression
    # ------------------------------------------------------------------

    def update(self, id: int, name: str, description: Optional[str], price, stock: int,
               category_ids: Optional[Iterable[int]] = None) -> ProductResponse:
        product = self.find_by_id(id)
        name = self._clean_name(name, "update")
        price = self._check_price(price)
        stock = self._check_stock(stock)
        categories = self._resolve_categories(category_ids)

        product.name = name
        product.description = description
        product.price = price
        product.stock = stock
        update_to_db(product, self.db)

        # Remplacement complet des associations (pas de fusion)
        self._unlink_all_categories(product)
        self._link_categories(product, categories)
        logger.info(f"Produit mis à jour : {product.id} ({product.name})")
        return self.to_response(product)

    def update_stock(self, id: int, new_stock: int) -> ProductResponse:
        new_stock = self._check_stock(new_stock)
        product = self.find_by_id(id)
        product.stock = new_stock
        update_to_db(product, self.db)
        logger.info(f"Stock du produit {id} mis à jour : {new_stock}")
        return self.to_response(product)

    def update_price(self, id: int, new_price) -> ProductResponse:
        new_price = self._check_price(new_price)
        product = self.find_by_id(id)
        product.price = new_price
        update_to_db(product, self.db)
        logger.info(f"Prix du produit {id} mis à jour : {new_price}")
        return self.to_response(product)

    def delete(self, id: int) -> None:
        product = self.find_by_id(id)
        delete_from_db(product, self.db)
        logger.info(f"Produit supprimé : {id}")

    # ------------------------------------------------------------------
    # Associations produit-catégorie
    # ------------------------------------------------------------------

    def associate_category(self, product_id: int, category_id: int) -> None:
        product = self.find_by_id(product_id)
        category = self.categories.find_by_id(category_id)
        if self._find_link(product.id, category.id):
            raise AlreadyAssociatedError(get_error_key("products", "categories", "already_associated"),
                                         product_id=product.id, category_id=category.id)

        link = ProductCategory(product_id=product.id, category_id=category.id,
                               associated_at=datetime.now(timezone.utc))
        save_to_db(link, self.db)
        logger.info(f"Produit {product.id} associé à la catégorie {category.id}")

    def disassociate_category(self, product_id: int, category_id: int) -> None:
        product = self.find_by_id(product_id)
        category = self.categories.find_by_id(category_id)
        link = self._find_link(product.id, category.id)
        if not link:
            raise NotAssociatedError(get_error_key("products", "categories", "not_associated"),
                                     product_id=product.id, category_id=category.id)

        delete_from_db(link, self.db)
        logger.info(f"Produit {product.id} dissocié de la catégorie {category.id}")

    def categories_of(self, product_id: int) -> List[str]:
        product = self.find_by_id(product_id)
        return self._category_names(product.id)

    # ------------------------------------------------------------------
    # Agrégats
    # ------------------------------------------------------------------

    def total_inventory_value(self) -> Decimal:
        total = self.db.query(func.sum(Product.price * Product.stock)).scalar()
        if total is None:
            return Decimal("0.00")
        return Decimal(str(total)).quantize(CENTS)

    def low_stock(self, threshold: Optional[int] = None) -> List[ProductResponse]:
        if threshold is None:
            threshold = self._low_stock_threshold
        products = (
            self.db.query(Product)
            .filter(Product.stock < threshold)
            .order_by(Product.stock.asc(), Product.name.asc())
            .all()
        )
        return [self.to_response(p) for p in products]

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def to_response(self, product: Product) -> ProductResponse:
        return ProductResponse(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            categories=self._category_names(product.id),
        )

    def _category_names(self, product_id: int) -> List[str]:
        rows = (
            self.db.query(Category.name)
            .join(ProductCategory, ProductCategory.category_id == Category.id)
            .filter(ProductCategory.product_id == product_id)
            .order_by(Category.name.asc())
            .all()
        )
        return [name for (name,) in rows]

    # ------------------------------------------------------------------
    # Outils internes
    # ------------------------------------------------------------------

    def _find_link(self, product_id: int, category_id: int) -> Optional[ProductCategory]:
        return (
            self.db.query(ProductCategory)
            .filter(ProductCategory.product_id == product_id, ProductCategory.category_id == category_id)
            .first()
        )

    def _resolve_categories(self, category_ids: Optional[Iterable[int]]) -> List[Category]:
        if not category_ids:
            return []
        return [self.categories.find_by_id(category_id) for category_id in category_ids]

    def _link_categories(self, product: Product, categories: List[Category]) -> None:
        # Les doublons (dans la liste ou déjà en base) sont ignorés sans erreur
        for category in categories:
            if self._find_link(product.id, category.id):
                continue
            save_to_db(ProductCategory(product_id=product.id, category_id=category.id), self.db)

    def _unlink_all_categories(self, product: Product) -> None:
        links = self.db.query(ProductCategory).filter(ProductCategory.product_id == product.id).all()
        delete_all_from_db(links, self.db)

    def _clean_name(self, name: str, action: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidValueError(get_error_key("products", action, "blank_name"))
        return name

    def _check_price(self, price) -> Decimal:
        if price is None:
            raise InvalidValueError(get_error_key("products", "price", "invalid"))
        try:
            price = Decimal(str(price))
            # Le prix est stocké au centime près : 0.001 deviendrait 0.00
            rounded = price.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise InvalidValueError(get_error_key("products", "price", "invalid"))
        if not rounded.is_finite() or rounded <= 0:
            raise InvalidValueError(get_error_key("products", "price", "invalid"))
        if rounded > MAX_PRICE:
            raise InvalidValueError(get_error_key("products", "price", "too_large"), max=MAX_PRICE)
        return rounded

    def _check_stock(self, stock) -> int:
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            raise InvalidValueError(get_error_key("products", "stock", "invalid"))
        if stock > MAX_STOCK:
            raise InvalidValueError(get_error_key("products", "stock", "too_large"), max=MAX_STOCK)
        return stock
