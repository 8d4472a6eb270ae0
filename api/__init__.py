from api import auth, categories, products, pages, category_pages, product_pages, errors

__all__ = [
    "auth",
    "categories",
    "products",
    "pages",
    "category_pages",
    "product_pages",
    "errors",
]
