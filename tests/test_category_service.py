"""Tests for CategoryService against a real in-memory database."""

import pytest

from models import ProductCategory
from services import (
    DuplicateNameError,
    ErrorKind,
    InvalidValueError,
    NotFoundError,
)


class TestCreateCategory:

    def test_create_returns_projection_with_zero_products(self, category_service):
        category = category_service.create("Electronica")

        assert category.id is not None
        assert category.name == "Electronica"
        assert category.product_count == 0

    def test_name_is_trimmed(self, category_service):
        assert category_service.create("  Hogar  ").name == "Hogar"

    @pytest.mark.parametrize("second", ["electronica", "ELECTRONICA", "ElEcTrOnIcA"])
    def test_duplicate_name_differing_only_in_case_rejected(self, category_service, second):
        category_service.create("Electronica")

        with pytest.raises(DuplicateNameError) as exc_info:
            category_service.create(second)

        assert exc_info.value.kind == ErrorKind.DUPLICATE_NAME
        assert second in exc_info.value.detail
        assert len(category_service.list()) == 1

    def test_blank_name_rejected(self, category_service):
        with pytest.raises(InvalidValueError):
            category_service.create("   ")


class TestReadCategories:

    def test_list_is_ordered_by_name_with_product_counts(self, category_service, product_service):
        ropa = category_service.create("Ropa")
        hogar = category_service.create("Hogar")
        category_service.create("Alimentacion")
        product_service.create("Cafetera", None, "129.00", 2, [hogar.id])
        product_service.create("Camiseta", None, "24.99", 50, [ropa.id, hogar.id])

        listed = category_service.list()

        assert [c.name for c in listed] == ["Alimentacion", "Hogar", "Ropa"]
        assert [c.product_count for c in listed] == [0, 2, 1]

    def test_get_by_id(self, category_service):
        created = category_service.create("Ropa")

        assert category_service.get_by_id(created.id) == created

    def test_get_unknown_id_raises_not_found(self, category_service):
        with pytest.raises(NotFoundError) as exc_info:
            category_service.get_by_id(999)

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert "999" in exc_info.value.detail


class TestUpdateCategory:

    def test_rename(self, category_service):
        created = category_service.create("Ropa")

        updated = category_service.update(created.id, "Moda")

        assert updated.id == created.id
        assert updated.name == "Moda"
        assert category_service.get_by_id(created.id).name == "Moda"

    @pytest.mark.parametrize("same_name", ["Ropa", "ropa", "ROPA"])
    def test_rename_to_own_name_in_any_case_allowed(self, category_service, same_name):
        created = category_service.create("Ropa")

        updated = category_service.update(created.id, same_name)

        assert updated.name == same_name

    def test_rename_to_other_category_name_rejected(self, category_service):
        category_service.create("Hogar")
        ropa = category_service.create("Ropa")

        with pytest.raises(DuplicateNameError):
            category_service.update(ropa.id, "HOGAR")

        assert category_service.get_by_id(ropa.id).name == "Ropa"

    def test_update_unknown_id_raises_not_found(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.update(42, "Anything")


class TestDeleteCategory:

    def test_delete(self, category_service):
        created = category_service.create("Ropa")

        category_service.delete(created.id)

        with pytest.raises(NotFoundError):
            category_service.get_by_id(created.id)

    def test_delete_unknown_id_raises_not_found(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.delete(7)

    def test_delete_cascades_to_associations(self, db, category_service, product_service):
        electronica = category_service.create("Electronica")
        informatica = category_service.create("Informatica")
        product = product_service.create("Monitor", None, "499.00", 4, [electronica.id, informatica.id])

        category_service.delete(electronica.id)

        assert product_service.categories_of(product.id) == ["Informatica"]
        remaining = db.query(ProductCategory).filter(ProductCategory.category_id == electronica.id).count()
        assert remaining == 0
        # The product itself survives
        assert product_service.get_by_id(product.id).name == "Monitor"
