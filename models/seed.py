import logging
from decimal import Decimal
from sqlalchemy.orm import Session

from .categories import Category
from .products import Product
from .product_categories import ProductCategory

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = ["Electronica", "Informatica", "Hogar", "Ropa", "Alimentacion"]

DEMO_PRODUCTS = [
    {
        "name": "Portatil Lenovo ThinkPad",
        "description": "Portatil profesional con Intel i7, 16GB RAM, 512GB SSD",
        "price": Decimal("1299.99"), "stock": 8,
        "categories": ["Electronica", "Informatica"],
    },
    {
        "name": "Raton inalambrico Logitech MX",
        "description": "Raton multidispositivo",
        "price": Decimal("79.90"), "stock": 3,
        "categories": ["Informatica"],
    },
    {
        "name": "Auriculares Sony WH-1000XM5",
        "description": "Cancelacion de ruido y bateria de 20h",
        "price": Decimal("349.00"), "stock": 15,
        "categories": ["Electronica"],
    },
    {
        "name": "Cafetera Nespresso Vertuo",
        "description": "Cafetera automatica compatible con capsulas Vertuo",
        "price": Decimal("129.00"), "stock": 2,
        "categories": ["Hogar", "Electronica"],
    },
    {
        "name": "Camiseta Algodon Premium",
        "description": "100% algodon organico, varios colores disponibles",
        "price": Decimal("24.99"), "stock": 50,
        "categories": ["Ropa"],
    },
    {
        "name": "Monitor LG 27\" 4K",
        "description": "Panel IPS, 144Hz, HDR, USB-C",
        "price": Decimal("499.00"), "stock": 4,
        "categories": ["Informatica", "Electronica"],
    },
    {
        "name": "Pack Cafe Molido Especial",
        "description": "Mezcla de tueste medio, 500g, origen Etiopia",
        "price": Decimal("12.50"), "stock": 1,
        "categories": ["Alimentacion"],
    },
]

def insert_demo_catalog(db: Session):
    """Charge un catalogue de démonstration si aucune catégorie n'existe."""
    if db.query(Category).count() > 0:
        logger.info("Catalogue déjà présent, chargement des données de démonstration ignoré.")
        return

    logger.info("Chargement des données de démonstration...")
    categories = {name: Category(name=name) for name in DEMO_CATEGORIES}
    db.add_all(categories.values())

    for data in DEMO_PRODUCTS:
        product = Product(
            name=data["name"],
            description=data["description"],
            price=data["price"],
            stock=data["stock"],
        )
        db.add(product)
        for category_name in data["categories"]:
            db.add(ProductCategory(product=product, category=categories[category_name]))

    db.commit()
    logger.info("Données de démonstration chargées.")
