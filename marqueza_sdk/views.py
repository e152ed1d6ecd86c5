# marqueza_sdk/views.py
# Rich renderables for the back office screens. Functions named render_* return
# a renderable; show_* print it on the shared console.
from typing import Any, Callable, Dict, List, Optional

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .dashboard import DashboardData, DiscountWheel, OrderSummary
from .products import FORM_TAB, ProductsManager
from .profile import (
    EditProfileForm,
    UserProfile,
    format_member_since,
    get_user_initials,
    is_valid_image_url,
)

console = Console()

DEFAULT_SHIPPING_TEXT = "Ships in 3-5 business days. Free pickup at the workshop."


def money(amount: Any) -> str:
    try:
        return f"${float(amount):,.2f}"
    except (TypeError, ValueError):
        return "-"


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


class ConsoleNotifier:
    """Toast-style notifications printed as small status panels."""

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def success(self, message: str) -> None:
        self.console.print(show_status(message, True))

    def error(self, message: str) -> None:
        self.console.print(show_status(message, False))


# ---------------------------
# Products
# ---------------------------
def render_products(products: List[Dict[str, Any]], category_name: Optional[Callable[[Any], str]] = None):
    if not products:
        return Text("No products found", style="italic yellow")

    table = Table(
        title="Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True,
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Category", width=18)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Custom", justify="center", width=7)

    for p in products:
        ref = p.get("categoryId")
        if category_name is not None:
            cat = category_name(ref)
        else:
            cat = ref.get("name", "") if isinstance(ref, dict) else (ref or "")
        table.add_row(
            str(p.get("_id", "N/A"))[:12],
            p.get("name", "N/A"),
            cat or "-",
            money(p.get("price")),
            str(p.get("stock", 0)),
            "yes" if p.get("isPersonalizable") else "no",
        )
    return table


def render_products_header(manager: ProductsManager, search_term: str = ""):
    filtered = manager.filtered_products(search_term)
    label = "Processing..." if manager.is_submitting else "Add product"
    text = Text()
    text.append("Product management\n", style="bold")
    text.append("Manage the products available in the store\n", style="dim")
    text.append(f"Total products: {len(manager.products)} | Filtered: {len(filtered)}", style="dim")
    text.append(f"\n[{label}]", style="bold magenta" if not manager.is_submitting else "dim")
    return Panel(text, border_style="magenta")


def render_product_form(manager: ProductsManager):
    form = manager.form
    errors = manager.validation_errors
    editing = bool(form.id)

    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Field", style="bold", width=16)
    table.add_column("Value", width=44)
    table.add_column("Error", style="red", width=40)

    image_label = form.image.filename if form.image else ", ".join(form.current_images) or "-"
    rows = [
        ("Name", form.name, "name"),
        ("Description", form.description, "description"),
        ("Price", form.price, "price"),
        ("Stock", str(form.stock), "stock"),
        ("Category", manager.category_name(form.category_id) or form.category_id, "categoryId"),
        ("Personalizable", "yes" if form.is_personalizable else "no", None),
        ("Details", form.details, "details"),
        ("Image", image_label, "image"),
    ]
    for label, value, key in rows:
        table.add_row(label, value or "", errors.get(key, "") if key else "")

    body = [table]
    if errors.get("general"):
        body.append(Text(errors["general"], style="bold red"))
    title = "Edit product" if editing else "New product"
    return Panel(Group(*body), title=title, border_style="cyan")


def render_products_screen(manager: ProductsManager, search_term: str = ""):
    if manager.loading:
        return Text("Loading products...", style="dim")
    if manager.active_tab == FORM_TAB:
        return render_product_form(manager)
    return Group(
        render_products_header(manager, search_term),
        render_products(manager.filtered_products(search_term), manager.category_name),
    )


class ProductTabs:
    """Description / details / shipping tab group on the product page."""

    TABS = ("description", "details", "shipping")
    LABELS = {"description": "Description", "details": "Details", "shipping": "Shipping"}

    def __init__(self, description: str = "", details: str = "", shipping: str = DEFAULT_SHIPPING_TEXT):
        self.tab = "description"
        self._content = {"description": description, "details": details, "shipping": shipping}

    def select(self, tab: str) -> bool:
        if tab not in self.TABS:
            return False
        self.tab = tab
        return True

    def content(self) -> Optional[str]:
        return self._content.get(self.tab)

    def render(self):
        header = Text()
        for tab in self.TABS:
            style = "bold magenta underline" if tab == self.tab else "dim"
            header.append(f" {self.LABELS[tab]} ", style=style)
            header.append("  ")
        return Panel(Group(header, Text(self.content() or "")), box=box.MINIMAL)


# ---------------------------
# Profile
# ---------------------------
def render_user_info_card(profile: UserProfile):
    if profile.loading:
        return Panel("Loading profile information...", title="Personal information")
    if profile.error:
        return Panel(
            Text.assemble(("Error loading profile\n", "bold red"), (profile.error, "")),
            title="Personal information",
            border_style="red",
        )
    data = profile.profile_data
    if not data:
        return Panel(
            "Could not load the user's data",
            title="No profile information",
            border_style="yellow",
        )

    picture = data.get("profilePicture")
    avatar = picture if is_valid_image_url(picture) else f"({get_user_initials(data.get('name'))})"

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Photo", avatar)
    table.add_row("Name", data.get("name") or "-")
    table.add_row("Member since", str(format_member_since(data.get("createdAt"))))
    table.add_row("Email", data.get("email") or "-")
    table.add_row("Phone", data.get("phone") or "-")
    table.add_row("Address", data.get("address") or "-")
    return Panel(table, title="Personal information", border_style="magenta")


def render_edit_profile(form: EditProfileForm):
    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value", width=40)
    table.add_column("Error", style="red", width=40)

    data = form.form_data
    picture = data.get("profilePicture")
    preview = form.display_image()
    if preview and preview.startswith("data:"):
        preview = preview[:32] + "..."
    rows = [
        ("Full name", data.get("fullName"), "fullName"),
        ("Phone", data.get("phone"), "phone"),
        ("Address", data.get("address"), "address"),
        ("Email", data.get("email"), None),
        ("Picture", picture.filename if picture else (preview or "-"), "profilePicture"),
    ]
    for label, value, key in rows:
        table.add_row(label, value or "", (form.errors.get(key) or "") if key else "")

    body = [table]
    if form.errors.get("general"):
        body.append(Text(form.errors["general"], style="bold red"))
    if form.success:
        body.append(Text("Profile updated successfully", style="bold green"))
    return Panel(Group(*body), title="Edit profile", border_style="magenta")


# ---------------------------
# Orders / dashboard
# ---------------------------
def render_order_summary(summary: OrderSummary):
    totals = Table(show_header=False, box=None, expand=True)
    totals.add_column("Label")
    totals.add_column("Amount", justify="right")
    totals.add_row("Sub total", money(summary.subtotal))
    totals.add_row("Shipping", money(summary.shipping))
    totals.add_row("[bold]Total[/bold]", f"[bold]{money(summary.total)}[/bold]")

    lines = Table(show_header=False, box=None, expand=True)
    lines.add_column("Item", style="dim")
    lines.add_column("Amount", justify="right")
    for line in summary.lines:
        lines.add_row(f"{line.name} x {line.quantity}", money(line.line_total))

    return Panel(
        Group(totals, Text("Products", style="bold"), lines),
        title="Order summary",
        border_style="blue",
    )


def render_discount_wheel(wheel: DiscountWheel):
    state = "[green]enabled[/green]" if wheel.enabled else "[dim]disabled[/dim]"
    if wheel.loading:
        state = "[yellow]updating...[/yellow]"
    prompt = (
        "The wheel is currently available to customers"
        if wheel.enabled
        else "Enable the discount and promotions wheel?"
    )
    return Panel(
        f"Status: {state}\n{prompt}\n\n"
        f"[dim]Active promotions[/dim] {wheel.active_promotions}\n"
        f"[dim]Uses this week[/dim] {wheel.weekly_uses}",
        title="Discount wheel",
        border_style="yellow",
    )


def render_dashboard(data: DashboardData, wheel: DiscountWheel, admin_name: str = ""):
    greeting = f"Welcome back, {admin_name}!" if admin_name else "Welcome back!"

    cards = Table.grid(padding=(0, 4))
    for _ in range(4):
        cards.add_column(justify="center")
    growth = data.new_clients.get("growthPercentage", 0) if data.new_clients else 0
    cards.add_row(
        f"[bold]{data.total_clients}[/bold]\n[dim]Clients[/dim]",
        f"[bold]{data.new_clients.get('currentMonth', 0) if data.new_clients else 0}[/bold]\n"
        f"[dim]New this month ({growth:+}%)[/dim]",
        f"[bold]{data.product_count}[/bold]\n[dim]Products[/dim]",
        f"[bold]{money(data.inventory_value)}[/bold]\n[dim]Inventory value[/dim]",
    )

    monthly = Table(title="New clients per month", box=box.SIMPLE)
    monthly.add_column("Month")
    monthly.add_column("Clients", justify="right")
    for row in data.monthly_clients:
        monthly.add_row(row.get("month", "?"), str(row.get("count", 0)))

    low = Table(title="Low stock", box=box.SIMPLE)
    low.add_column("Product")
    low.add_column("Stock", justify="right")
    for p in data.low_stock[:5]:
        low.add_row(p.get("name", "?"), str(p.get("stock", 0)))

    return Group(
        Panel(f"[bold]{greeting}[/bold]\n[dim]A lot happened while you were away.[/dim]", border_style="blue"),
        Panel(cards, title="Overview"),
        monthly,
        low,
        render_discount_wheel(wheel),
    )
