from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from schemas.products import *
from services import ProductService, get_product_service
from utils.security import get_current_user, require_admin

router = APIRouter(prefix="/products")

@router.get("", response_model=list[ProductResponse])
def list_products(
    name: Optional[str] = Query(None, description="Recherche par nom (partielle, sans casse)"),
    category: Optional[str] = Query(None, description="Recherche par nom de catégorie"),
    current_user: dict = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    # La recherche par nom est prioritaire sur la recherche par catégorie
    if name and name.strip():
        return service.search_by_name(name.strip())
    if category and category.strip():
        return service.search_by_category(category.strip())
    return service.list()

# Les routes fixes doivent précéder /{id}
@router.get("/low-stock", response_model=list[ProductResponse])
def low_stock_products(
    threshold: Optional[int] = Query(None, description="Seuil (strictement inférieur), valeur configurée par défaut"),
    current_user: dict = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return service.low_stock(threshold)

@router.get("/inventory-value", response_model=InventoryValueResponse)
def inventory_value(
    current_user: dict = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return InventoryValueResponse(total_value=service.total_inventory_value())

@router.get("/{id}", response_model=ProductResponse)
def get_product(
    id: int,
    current_user: dict = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return service.get_by_id(id)

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return service.create(product.name, product.description, product.price, product.stock, product.category_ids)

@router.put("/{id}", response_model=ProductResponse)
def update_product(
    id: int,
    product: ProductCreate,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return service.update(id, product.name, product.description, product.price, product.stock,
                          product.category_ids)

@router.patch("/{id}/stock", response_model=ProductResponse)
def update_stock(
    id: int,
    payload: StockUpdate,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return service.update_stock(id, payload.stock)

@router.patch("/{id}/price", response_model=ProductResponse)
def update_price(
    id: int,
    payload: PriceUpdate,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return service.update_price(id, payload.price)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    id: int,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    service.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{id}/categories", response_model=list[str])
def product_categories(
    id: int,
    current_user: dict = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return service.categories_of(id)

@router.post("/{id}/categories/{category_id}", status_code=status.HTTP_201_CREATED)
def associate_category(
    id: int,
    category_id: int,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    service.associate_category(id, category_id)
    return Response(status_code=status.HTTP_201_CREATED)

@router.delete("/{id}/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def disassociate_category(
    id: int,
    category_id: int,
    current_user: dict = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    service.disassociate_category(id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
