# marqueza_sdk/dashboard.py
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from . import config
from .responses import unwrap_record

logger = logging.getLogger(__name__)


@dataclass
class DashboardData:
    total_clients: int = 0
    new_clients: Dict[str, Any] = field(default_factory=dict)
    monthly_clients: List[Dict[str, Any]] = field(default_factory=list)
    product_count: int = 0
    inventory_value: float = 0.0
    low_stock: List[Dict[str, Any]] = field(default_factory=list)


class Dashboard:
    """Collects the admin dashboard widgets. Each widget degrades to empty on failure."""

    def __init__(self, client, low_stock_threshold: int = config.LOW_STOCK_THRESHOLD):
        self.client = client
        self.low_stock_threshold = low_stock_threshold
        self.data = DashboardData()

    def _safe(self, fn: Callable[[], Any], default: Any, label: str) -> Any:
        try:
            return fn()
        except Exception as e:
            logger.warning("Could not load %s: %s", label, e)
            return default

    def load(self) -> DashboardData:
        data = DashboardData()
        data.total_clients = self._safe(
            lambda: unwrap_record(self.client.total_clients()).get("total", 0), 0, "total clients"
        )
        data.new_clients = self._safe(
            lambda: unwrap_record(self.client.new_clients_stats()), {}, "new clients stats"
        )
        data.monthly_clients = self._safe(
            lambda: unwrap_record(self.client.detailed_stats()).get("monthly", []), [], "detailed stats"
        )

        products = self._safe(self.client.list_products, [], "products")
        data.product_count = len(products)
        data.inventory_value = round(
            sum(float(p.get("price", 0)) * int(p.get("stock", 0)) for p in products), 2
        )
        data.low_stock = sorted(
            (p for p in products if int(p.get("stock", 0)) <= self.low_stock_threshold),
            key=lambda p: int(p.get("stock", 0)),
        )
        self.data = data
        return data


class DiscountWheel:
    """Enable/disable switch for the discount wheel offered to customers."""

    def __init__(self, delay: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.enabled = False
        self.loading = False
        self.active_promotions = 0
        self.weekly_uses = 0
        self._delay = delay
        self._sleep = sleep

    def toggle(self, enable: bool) -> bool:
        if self.loading or enable == self.enabled:
            return False
        self.loading = True
        try:
            # Stand-in for the remote call; there is no wheel endpoint yet
            self._sleep(self._delay)
            self.enabled = enable
            logger.info("Discount wheel %s", "enabled" if enable else "disabled")
        finally:
            self.loading = False
        return True


@dataclass
class OrderLine:
    name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return round(self.quantity * self.unit_price, 2)


@dataclass
class OrderSummary:
    lines: List[OrderLine] = field(default_factory=list)
    shipping: float = config.SHIPPING_FEE

    @property
    def subtotal(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def total(self) -> float:
        return round(self.subtotal + self.shipping, 2)
