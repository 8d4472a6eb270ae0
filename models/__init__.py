from .base import *
from .categories import *
from .products import *
from .product_categories import *
from .users import *
from .seed import *

__all__ = ["Base", "engine", "SessionLocal", "get_db", "get_db_context", "save_to_db", "update_to_db",
           "delete_from_db", "delete_all_from_db", "Category", "Product", "ProductCategory", "User", "Role",
           "insert_default_users", "insert_demo_catalog"]
