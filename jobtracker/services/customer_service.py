"""Customer directory: add, list, search, and map import rows to customers."""

from collections.abc import Mapping

from jobtracker.core.db import CustomerStore
from jobtracker.core.models import Customer, CustomerCreate
from jobtracker.core.utils import as_text, get_logger

logger = get_logger("jobtracker.customers")


def customer_from_row(row: Mapping) -> CustomerCreate | None:
    """Map a customer CSV row (``Name``, ``Reference``, ``Address``, ``Phone``); rows without a name are dropped."""
    name = as_text(row.get("Name"))
    if not name:
        return None
    return CustomerCreate(
        name=name,
        reference=as_text(row.get("Reference")),
        address=as_text(row.get("Address")),
        phone=as_text(row.get("Phone")),
    )


class CustomerService:
    """Operations on the customer directory."""

    def __init__(self, store: CustomerStore) -> None:
        """Initialize the service with a customer store."""
        self.store = store

    def list_customers(self, search: str | None = None) -> list[Customer]:
        """Customers ordered by name, optionally filtered by name, address or phone."""
        customers = self.store.find(order_by="name")
        needle = (search or "").strip().lower()
        if not needle:
            return customers
        return [
            customer
            for customer in customers
            if needle in customer.name.lower() or needle in customer.address.lower() or needle in customer.phone.lower()
        ]

    def create_customer(self, data: CustomerCreate) -> Customer:
        """Add a customer."""
        customer = self.store.create(data)
        logger.info(f"Created customer {customer.id} '{customer.name}'")
        return customer
