#!/usr/bin/env python
import base64

from marqueza_sdk import config
from marqueza_sdk.auth import AuthSession
from marqueza_sdk.client import StoreClient
from marqueza_sdk.dashboard import Dashboard, DiscountWheel
from marqueza_sdk.products import ProductsManager
from marqueza_sdk.profile import EditProfileForm, UserProfile
from marqueza_sdk.validation import ImageFile
from marqueza_sdk.views import (
    ConsoleNotifier,
    console,
    render_dashboard,
    render_product_form,
    render_products_screen,
    render_user_info_card,
)

# 1x1 transparent PNG
PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def main():
    config.configure_logging("INFO")
    c = StoreClient(base_url="http://127.0.0.1:4000/api")

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()
    session = AuthSession(c)
    session.login_with_token("demo-token")

    # -----------------------------
    # Catalog
    # -----------------------------
    manager = ProductsManager(c, ConsoleNotifier())
    manager.load()
    lavender = manager.categories[0]

    print("\nSubmitting an invalid product (no network call is made)...")
    manager.open_form()
    manager.create_product({"name": "A", "description": "short", "price": "0", "stock": "-1",
                            "categoryId": "", "image": None})
    console.print(render_product_form(manager))

    print("\nCreating products...")
    manager.create_product({
        "name": "Lavender bouquet",
        "description": "Hand-tied bouquet of dried lavender stems",
        "price": "10.00",
        "stock": "12",
        "categoryId": lavender["_id"],
        "isPersonalizable": True,
        "details": "Ribbon color can be chosen at checkout",
        "image": ImageFile("lavender.png", "image/png", PIXEL),
    })
    manager.create_product({
        "name": "Simple home frame",
        "description": "Wooden frame for 20x25 prints, natural finish",
        "price": "34.00",
        "stock": "3",
        "categoryId": manager.categories[1]["_id"],
        "image": ImageFile("frame.png", "image/png", PIXEL),
    })
    console.print(render_products_screen(manager))

    print("\nEditing the frame price (text-only, JSON body)...")
    manager.update_product(manager.products[-1])
    data = manager.form.to_data()
    data["price"] = "36.50"
    manager.handle_edit(data)
    console.print(render_products_screen(manager))

    # -----------------------------
    # Profile
    # -----------------------------
    profile = UserProfile(c, session)
    profile.load()
    console.print(render_user_info_card(profile))

    form = EditProfileForm(c, session)
    try:
        form.initialize_form(profile.profile_data)
        form.handle_input_change("phone", "81234567")
        form.handle_input_change("address", "Colonia San Benito, San Salvador")
        print("\nFormatted phone:", form.form_data["phone"])
        print(form.submit_form())
    finally:
        form.close()

    # -----------------------------
    # Dashboard
    # -----------------------------
    wheel = DiscountWheel(delay=0.2)
    wheel.toggle(True)
    console.print(render_dashboard(Dashboard(c).load(), wheel, session.user_info.get("name", "")))


if __name__ == "__main__":
    main()
