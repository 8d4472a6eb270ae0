from decimal import Decimal

from config import USER_PASSWORD


class TestLoginPages:

    def test_anonymous_visitor_is_redirected_to_login(self, client):
        response = client.get("/products", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_login_page(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert "<h1>Login</h1>" in response.text

    def test_failed_login_rerenders_form(self, client):
        response = client.post("/login", data={"username": "user", "password": "nope"})

        assert response.status_code == 401
        assert "Invalid username or password" in response.text

    def test_login_sets_cookie_and_logout_clears_it(self, client):
        response = client.post("/login", data={"username": "user", "password": USER_PASSWORD},
                               follow_redirects=False)
        assert response.status_code == 303
        assert "access_token" in response.cookies

        response = client.get("/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login?logout"
        assert client.get("/", follow_redirects=False).status_code == 303


class TestDashboard:

    def test_dashboard_shows_totals(self, admin_browser, product_service):
        product_service.create("A", None, "10.00", 2)
        product_service.create("B", None, "5.50", 4)

        response = admin_browser.get("/")

        assert response.status_code == 200
        assert '<strong id="total-products">2</strong>' in response.text
        assert '<strong id="inventory-value">42.00</strong>' in response.text
        assert '<strong id="low-stock-count">2</strong>' in response.text


class TestProductPages:

    def test_create_product_from_form(self, admin_browser, category_service, product_service):
        ropa = category_service.create("Ropa")

        response = admin_browser.post("/products/new", data={
            "name": "Camiseta", "description": "", "price": "24.99", "stock": "50",
            "category_ids": [str(ropa.id)],
        }, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/products?message=Product+created"
        [created] = product_service.list()
        assert created.name == "Camiseta"
        assert created.description is None
        assert created.categories == ["Ropa"]

        listing = admin_browser.get(response.headers["location"])
        assert "Product created" in listing.text
        assert "Camiseta" in listing.text

    def test_invalid_form_is_rerendered(self, admin_browser, product_service):
        response = admin_browser.post("/products/new", data={
            "name": "Camiseta", "price": "0", "stock": "-2",
        })

        assert response.status_code == 400
        assert 'value="Camiseta"' in response.text
        assert product_service.list() == []

    def test_stock_form(self, db, admin_browser, product_service):
        product = product_service.create("Raton", None, "79.90", 3)

        response = admin_browser.post(f"/products/{product.id}/stock", data={"stock": "12"},
                                      follow_redirects=False)

        assert response.status_code == 303
        # La page a écrit via sa propre session
        db.expire_all()
        assert product_service.get_by_id(product.id).stock == 12

    def test_invalid_price_form_keeps_price(self, admin_browser, product_service):
        product = product_service.create("Raton", None, "79.90", 3)

        response = admin_browser.post(f"/products/{product.id}/price", data={"price": "-1"})

        assert response.status_code == 400
        assert product_service.get_by_id(product.id).price == Decimal("79.90")

    def test_low_stock_page(self, admin_browser, product_service):
        product_service.create("Casi agotado", None, "1.00", 1)
        product_service.create("Bien surtido", None, "1.00", 30)

        response = admin_browser.get("/products/low-stock")

        assert response.status_code == 200
        assert "Casi agotado" in response.text
        assert "Bien surtido" not in response.text

    def test_unknown_product_renders_error_page(self, admin_browser):
        response = admin_browser.get("/products/999")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Product not found with id: 999" in response.text

    def test_user_role_cannot_open_admin_forms(self, user_browser):
        response = user_browser.get("/products/new")

        assert response.status_code == 403
        assert "Not authorized" in response.text

    def test_user_role_can_browse(self, user_browser, product_service):
        product_service.create("Raton", None, "79.90", 3)

        response = user_browser.get("/products")

        assert response.status_code == 200
        assert "Raton" in response.text
        assert "/products/new" not in response.text


class TestCategoryPages:

    def test_create_category_from_form(self, admin_browser, category_service):
        response = admin_browser.post("/categories/new", data={"name": " Hogar "}, follow_redirects=False)

        assert response.status_code == 303
        assert [c.name for c in category_service.list()] == ["Hogar"]

    def test_blank_name_is_rerendered(self, admin_browser, category_service):
        response = admin_browser.post("/categories/new", data={"name": "  "})

        assert response.status_code == 400
        assert 'class="error"' in response.text
        assert category_service.list() == []

    def test_duplicate_name_renders_error_page(self, admin_browser, category_service):
        category_service.create("Hogar")

        response = admin_browser.post("/categories/new", data={"name": "hogar"})

        assert response.status_code == 400
        assert "A category named &#39;hogar&#39; already exists" in response.text

    def test_delete_category(self, admin_browser, category_service):
        created = category_service.create("Hogar")

        response = admin_browser.post(f"/categories/{created.id}/delete", follow_redirects=False)

        assert response.status_code == 303
        assert category_service.list() == []
