# tests/test_dashboard_views.py
from unittest.mock import Mock

import pytest
from rich.console import Console

from marqueza_sdk.client import StoreClient
from marqueza_sdk.dashboard import Dashboard, DashboardData, DiscountWheel, OrderLine, OrderSummary
from marqueza_sdk.products import ProductsManager
from marqueza_sdk.profile import UserProfile
from marqueza_sdk.responses import ApiError
from marqueza_sdk.views import (
    ConsoleNotifier,
    ProductTabs,
    money,
    render_dashboard,
    render_order_summary,
    render_product_form,
    render_products_screen,
    render_user_info_card,
)


def render(renderable) -> str:
    out = Console(record=True, width=160)
    out.print(renderable)
    return out.export_text()


PRODUCTS = [
    {"_id": "p1", "name": "Lavender bouquet", "price": 10.0, "stock": 12,
     "categoryId": {"_id": "c1", "name": "Dried flowers"}, "isPersonalizable": True},
    {"_id": "p2", "name": "Simple frame", "price": 34.0, "stock": 3, "categoryId": "c2"},
    {"_id": "p3", "name": "Gift box", "price": 20.0, "stock": 0, "categoryId": "c2"},
]


@pytest.fixture
def api():
    api = Mock(spec=StoreClient)
    api.total_clients.return_value = {"success": True, "data": {"total": 42}}
    api.new_clients_stats.return_value = {
        "success": True, "data": {"currentMonth": 6, "previousMonth": 4, "growthPercentage": 50.0},
    }
    api.detailed_stats.return_value = {
        "success": True, "data": {"monthly": [{"month": "2026-10", "count": 6}], "total": 42},
    }
    api.list_products.return_value = PRODUCTS
    return api


def test_dashboard_collects_widgets(api):
    data = Dashboard(api, low_stock_threshold=5).load()
    assert data.total_clients == 42
    assert data.new_clients["growthPercentage"] == 50.0
    assert data.monthly_clients == [{"month": "2026-10", "count": 6}]
    assert data.product_count == 3
    assert data.inventory_value == 222.0
    assert [p["_id"] for p in data.low_stock] == ["p3", "p2"]


def test_dashboard_degrades_per_widget(api):
    api.detailed_stats.side_effect = ApiError("Error 404", status=404)
    api.total_clients.side_effect = ApiError("Error 500", status=500)
    data = Dashboard(api).load()
    assert data.total_clients == 0
    assert data.monthly_clients == []
    assert data.product_count == 3


def test_discount_wheel_toggle():
    delays = []
    wheel = DiscountWheel(delay=0.5, sleep=delays.append)
    assert wheel.toggle(True) is True
    assert wheel.enabled is True
    assert wheel.toggle(True) is False
    assert delays == [0.5]

    wheel.loading = True
    assert wheel.toggle(False) is False
    wheel.loading = False
    assert wheel.toggle(False) is True
    assert wheel.enabled is False


def test_order_summary_totals():
    summary = OrderSummary(lines=[OrderLine("Lavender", 2, 10.0), OrderLine("Frame", 1, 34.0)])
    assert summary.subtotal == 54.0
    assert summary.total == 64.0
    assert OrderSummary().total == 10.0


def test_money():
    assert money(1234.5) == "$1,234.50"
    assert money(None) == "-"


def test_product_tabs():
    tabs = ProductTabs("A lovely bouquet", "Ribbon color on request")
    assert tabs.content() == "A lovely bouquet"
    assert tabs.select("details")
    assert tabs.content() == "Ribbon color on request"
    assert not tabs.select("reviews")
    assert tabs.tab == "details"
    tabs.select("shipping")
    assert "business days" in tabs.content()


def test_products_screen_lists_categories():
    manager = ProductsManager(Mock(spec=StoreClient))
    manager.loading = False
    manager.categories = [{"_id": "c2", "name": "Home decor"}]
    manager.products = PRODUCTS

    text = render(render_products_screen(manager))
    assert "Total products: 3" in text
    assert "Dried flowers" in text
    assert "Home decor" in text

    text = render(render_products_screen(manager, "gift"))
    assert "Filtered: 1" in text


def test_products_screen_empty_and_loading():
    manager = ProductsManager(Mock(spec=StoreClient))
    assert "Loading products" in render(render_products_screen(manager))
    manager.loading = False
    assert "No products found" in render(render_products_screen(manager))


def test_product_form_shows_errors():
    manager = ProductsManager(Mock(spec=StoreClient))
    manager.open_form()
    manager.validation_errors = {"price": "Price must be greater than 0", "general": "Server down"}
    text = render(render_product_form(manager))
    assert "New product" in text
    assert "Price must be greater than 0" in text
    assert "Server down" in text


def test_user_info_card():
    profile = UserProfile(Mock(spec=StoreClient), Mock())
    profile.loading = False
    profile.profile_data = {
        "name": "Miguel Marqueza", "email": "miguel@marqueza.example", "phone": "7123-4567",
        "address": "Colonia Escalon", "createdAt": "2025-01-10T00:00:00+00:00", "profilePicture": None,
    }
    text = render(render_user_info_card(profile))
    assert "(MM)" in text
    assert "2025" in text

    profile.profile_data = None
    assert "Could not load the user's data" in render(render_user_info_card(profile))

    profile.error = "Error 500"
    assert "Error loading profile" in render(render_user_info_card(profile))


def test_dashboard_and_summary_render():
    data = DashboardData(total_clients=42, new_clients={"currentMonth": 6, "growthPercentage": 50.0},
                         product_count=3, inventory_value=222.0)
    text = render(render_dashboard(data, DiscountWheel(), "Miguel"))
    assert "Welcome back, Miguel!" in text
    assert "$222.00" in text
    assert "disabled" in text

    summary = OrderSummary(lines=[OrderLine("Lavender", 2, 10.0)])
    text = render(render_order_summary(summary))
    assert "Lavender x 2" in text
    assert "$30.00" in text


def test_console_notifier_prints_panels():
    out = Console(record=True, width=80)
    ConsoleNotifier(out).error("Please fix the errors in the form")
    assert "Please fix the errors in the form" in out.export_text()
