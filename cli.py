# cli.py - interactive back office for the Marqueza store
import sys
from datetime import datetime
from typing import Optional

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from rich import box
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from marqueza_sdk import config
from marqueza_sdk.auth import AuthSession
from marqueza_sdk.client import StoreClient
from marqueza_sdk.dashboard import Dashboard, DiscountWheel, OrderLine, OrderSummary
from marqueza_sdk.products import ProductsManager
from marqueza_sdk.profile import EditProfileForm, UserProfile
from marqueza_sdk.validation import ImageFile
from marqueza_sdk.views import (
    ConsoleNotifier,
    ProductTabs,
    console,
    render_dashboard,
    render_edit_profile,
    render_order_summary,
    render_product_form,
    render_products_screen,
    render_user_info_card,
    show_status,
)

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#8a2b6d #ffffff',
    'completion-menu.completion.current': 'bg:#e8acd2 #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def with_spinner(fn, *args, **kwargs):
    """Calls fn(*args, **kwargs) behind a transient spinner."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header(admin_name: str = ""):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "Marqueza back office",
        f"[bold magenta]{admin_name or 'not logged in'}[/bold magenta]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold magenta")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def product_completer(manager: ProductsManager):
    names = [p.get("name", "") for p in manager.products]
    ids = [p.get("_id", "") for p in manager.products]
    return WordCompleter([n for n in (names + ids) if n], ignore_case=True)


def find_product(manager: ProductsManager, key: str):
    for p in manager.products:
        if key in (p.get("_id"), p.get("name")):
            return p
    return None


def ask_image(message: str, required: bool) -> Optional[ImageFile]:
    while True:
        path = prompt_with_autocomplete(message).strip()
        if not path:
            if required:
                console.print("[yellow]An image is required (validation will flag it).[/yellow]")
            return None
        try:
            return ImageFile.from_path(path)
        except OSError as e:
            console.print(f"[red]Could not read {path}: {e}[/red]")


# ---------------------------
# Screens
# ---------------------------
def fill_product_form(manager: ProductsManager):
    form = manager.form
    categories = {c.get("name", ""): c.get("_id", "") for c in manager.categories}

    form.name = prompt_with_autocomplete("Product name", default=form.name)
    form.description = prompt_with_autocomplete("Description", default=form.description)
    form.price = Prompt.ask("Price", default=str(form.price or ""))
    form.stock = Prompt.ask("Stock", default=str(form.stock))
    current = manager.category_name(form.category_id)
    picked = prompt_with_autocomplete(
        "Category", completer=WordCompleter(list(categories), ignore_case=True), default=current
    ).strip()
    form.category_id = categories.get(picked, picked)
    form.is_personalizable = Confirm.ask("Personalizable?", default=form.is_personalizable)
    form.details = prompt_with_autocomplete("Details (optional)", default=form.details)
    form.image = ask_image("Image path (blank to keep current)" if form.id else "Image path", not form.id)


def product_form_loop(manager: ProductsManager):
    while True:
        fill_product_form(manager)
        result = with_spinner(manager.submit, manager.form.to_data())
        if result is not None:
            return
        console.print(render_product_form(manager))
        if not Confirm.ask("Fix the form and try again?", default=True):
            manager.close_form()
            return


def show_product_details(product):
    tabs = ProductTabs(product.get("description", ""), product.get("details", ""))
    while True:
        console.print(Panel(f"[bold]{product.get('name')}[/bold]", border_style="magenta"))
        console.print(tabs.render())
        choice = prompt_with_autocomplete(
            "Tab (description/details/shipping, blank to go back)",
            completer=WordCompleter(list(ProductTabs.TABS)),
        ).strip()
        if not choice:
            return
        if not tabs.select(choice):
            console.print(f"[yellow]Unknown tab '{choice}'[/yellow]")


def edit_profile(client: StoreClient, session: AuthSession, profile: UserProfile):
    form = EditProfileForm(client, session)
    try:
        form.initialize_form(profile.profile_data or session.user_info or {})
        for field, label in (("fullName", "Full name"), ("phone", "Phone (7XXX-XXXX)"), ("address", "Address")):
            value = prompt_with_autocomplete(label, default=form.form_data[field])
            form.handle_input_change(field, value)
        picture = ask_image("Profile picture path (blank to keep current)", False)
        if picture is not None:
            form.handle_image_change(picture)
            form.wait_for_preview(timeout=5)
        console.print(render_edit_profile(form))
        if not Confirm.ask("Save changes?", default=True):
            return
        result = with_spinner(form.submit_form)
        console.print(show_status(result.message, result.success))
        if not result.success:
            console.print(render_edit_profile(form))
        else:
            profile.fetch_user_profile()
    finally:
        form.close()


def order_summary_screen(manager: ProductsManager):
    summary = OrderSummary()
    completer = product_completer(manager)
    while True:
        key = prompt_with_autocomplete("Product (blank to finish)", completer=completer).strip()
        if not key:
            break
        product = find_product(manager, key)
        if product is None:
            console.print(f"[yellow]No product '{key}'[/yellow]")
            continue
        qty = IntPrompt.ask("Quantity", default=1)
        summary.lines.append(OrderLine(product["name"], qty, float(product.get("price", 0))))
    console.print(render_order_summary(summary))


# ---------------------------
# Main menu
# ---------------------------
def menu():
    client = StoreClient()
    session = AuthSession(client)
    notifier = ConsoleNotifier()
    manager = ProductsManager(client, notifier)
    profile = UserProfile(client, session)
    wheel = DiscountWheel()

    token = config.API_TOKEN or Prompt.ask("Access token", default="demo-token")
    user = with_spinner(session.login_with_token, token)
    admin_name = (user or {}).get("name", "")

    console.clear()
    console.print(create_header(admin_name))
    with_spinner(manager.load)

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "List products", "7", "View profile"),
            ("2", "Search products", "8", "Edit profile"),
            ("3", "Add product", "9", "Dashboard"),
            ("4", "Edit product", "10", "Toggle discount wheel"),
            ("5", "Delete product", "11", "Order summary"),
            ("6", "Product details", "12", "Reset store"),
            ("", "", "q", "Log out and quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="Menu", border_style="magenta"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 13)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            with_spinner(manager.fetch_products)
            console.print(render_products_screen(manager))

        elif choice == "2":
            term = prompt_with_autocomplete("Enter search term")
            console.print(render_products_screen(manager, term))

        elif choice == "3":
            manager.open_form()
            product_form_loop(manager)

        elif choice == "4":
            key = prompt_with_autocomplete("Product to edit", completer=product_completer(manager)).strip()
            product = find_product(manager, key)
            if product is None:
                console.print(show_status(f"No product '{key}'", False))
                continue
            manager.update_product(product)
            product_form_loop(manager)

        elif choice == "5":
            key = prompt_with_autocomplete("Product to delete", completer=product_completer(manager)).strip()
            product = find_product(manager, key)
            if product is None:
                console.print(show_status(f"No product '{key}'", False))
                continue
            if Confirm.ask(f"[red]Delete '{product['name']}'?[/red]"):
                with_spinner(manager.delete_product, product["_id"])

        elif choice == "6":
            key = prompt_with_autocomplete("Product", completer=product_completer(manager)).strip()
            product = find_product(manager, key)
            if product is None:
                console.print(show_status(f"No product '{key}'", False))
                continue
            show_product_details(product)

        elif choice == "7":
            with_spinner(profile.load)
            console.print(render_user_info_card(profile))

        elif choice == "8":
            if profile.profile_data is None:
                with_spinner(profile.load)
            edit_profile(client, session, profile)

        elif choice == "9":
            data = with_spinner(Dashboard(client).load)
            console.print(render_dashboard(data, wheel, admin_name))

        elif choice == "10":
            enable = not wheel.enabled
            with_spinner(wheel.toggle, enable)
            console.print(render_dashboard_wheel_status(wheel))

        elif choice == "11":
            order_summary_screen(manager)

        elif choice == "12":
            if Confirm.ask("[red]This will restore the demo data. Continue?[/red]"):
                with_spinner(client.reset)
                session.login_with_token(token)
                manager.load()
                console.print(show_status("Store reset successfully", True))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                session.logout()
                console.print(Panel.fit("[bold green]Session closed. Goodbye![/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def render_dashboard_wheel_status(wheel: DiscountWheel):
    message = "Discount wheel enabled" if wheel.enabled else "Discount wheel disabled"
    return show_status(message, wheel.enabled)


def main():
    config.configure_logging()
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
