from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from admin_query.schemas.filters import FilterProperty
from admin_query.services.filter_operators import operators_for_kind

ViewPredicate = Callable[[Mapping[str, Any]], bool]

VIEW_ALL = "all"


class UnknownResourceError(LookupError):
    pass


class UnknownViewError(LookupError):
    pass


@dataclass(frozen=True)
class ResourceDefinition:
    name: str
    query_field: str
    fields: tuple[str, ...]
    views: dict[str, ViewPredicate] = field(default_factory=dict)
    filter_properties: tuple[FilterProperty, ...] = ()
    # Column whose truthiness or equality a view tests; used by the SQL translation.
    view_field: str | None = "status"

    def view_predicate(self, view: str, strict: bool = False) -> ViewPredicate:
        """Predicate for a named view.

        An unnamed view still tests the view column for equality, or keeps
        every record when the resource's views are flags. ``strict`` raises
        instead.
        """
        predicate = self.views.get(view)
        if predicate is not None:
            return predicate
        if strict:
            raise UnknownViewError(f'Unknown view "{view}" for resource "{self.name}"')
        if self.view_field:
            return _field_view(self.view_field, view)
        return _keep_all

    def filter_property(self, name: str) -> FilterProperty | None:
        for prop in self.filter_properties:
            if prop.name == name:
                return prop
        return None


def _prop(name: str, label: str, kind: str | None) -> FilterProperty:
    return FilterProperty(name=name, label=label, operators=operators_for_kind(kind))


def _field_view(field_name: str, value: str) -> ViewPredicate:
    return lambda record: record.get(field_name) == value


def _keep_all(record: Mapping[str, Any]) -> bool:
    return True


def _status_view(status: str) -> ViewPredicate:
    return _field_view("status", status)


def _flag_view(flag: str) -> ViewPredicate:
    return lambda record: bool(record.get(flag))


CUSTOMERS = ResourceDefinition(
    name="customers",
    query_field="name",
    fields=(
        "id",
        "avatar",
        "city",
        "country",
        "createdAt",
        "dateOfBirth",
        "email",
        "isFavorite",
        "isReturning",
        "isTaxExempt",
        "lastContactChannel",
        "lastContactDate",
        "lastOrderDate",
        "name",
        "orderValue",
        "orderedRecently",
        "ordersPlaced",
        "phone",
        "status",
        "storeCredit",
        "street",
    ),
    views={
        "isReturning": _flag_view("isReturning"),
        "orderedRecently": _flag_view("orderedRecently"),
    },
    filter_properties=(
        _prop("name", "Name", "string"),
        _prop("email", "Email", "string"),
        _prop("phone", "Phone", "string"),
        _prop("status", "Status", "string"),
        _prop("createdAt", "Created", "date"),
        _prop("lastOrderDate", "Last Order", "date"),
        _prop("orderValue", "Order Value", "number"),
        _prop("ordersPlaced", "Orders Placed", "number"),
        _prop("storeCredit", "Store Credit", "number"),
    ),
    view_field=None,
)

ORDERS = ResourceDefinition(
    name="orders",
    query_field="id",
    fields=(
        "id",
        "completedAt",
        "courier",
        "createdAt",
        "currency",
        "deliveredAt",
        "discount",
        "paymentId",
        "paymentMethod",
        "paymentStatus",
        "processedAt",
        "status",
        "subtotalAmount",
        "taxAmount",
        "totalAmount",
        "trackingCode",
        "updatedAt",
    ),
    views={
        "complete": _status_view("complete"),
        "delivered": _status_view("delivered"),
        "processed": _status_view("processed"),
    },
    filter_properties=(
        _prop("id", "ID", "string"),
        _prop("status", "Status", "string"),
        _prop("createdAt", "Created", "date"),
        _prop("updatedAt", "Updated", "date"),
        _prop("courier", "Courier", "string"),
        _prop("paymentMethod", "Payment Method", "string"),
        _prop("totalAmount", "Total", "number"),
    ),
)

INVOICES = ResourceDefinition(
    name="invoices",
    query_field="ref",
    fields=(
        "id",
        "currency",
        "dueDate",
        "issueDate",
        "note",
        "paidAt",
        "paymentMethod",
        "paymentStatus",
        "ref",
        "status",
        "subtotalAmount",
        "taxAmount",
        "totalAmount",
        "transactionFees",
        "transactionId",
    ),
    views={
        "ongoing": _status_view("ongoing"),
        "paid": _status_view("paid"),
        "overdue": _status_view("overdue"),
    },
    filter_properties=(
        _prop("ref", "Ref", "string"),
        _prop("status", "Status", "string"),
        _prop("paymentMethod", "Payment Method", "string"),
        _prop("issueDate", "Issued", "date"),
        _prop("dueDate", "Due", "date"),
        _prop("paidAt", "Paid", "date"),
        _prop("totalAmount", "Total", "number"),
    ),
)

PRODUCTS = ResourceDefinition(
    name="products",
    query_field="name",
    fields=(
        "id",
        "brand",
        "category",
        "chargeTax",
        "createdAt",
        "currency",
        "description",
        "displayName",
        "image",
        "name",
        "price",
        "size",
        "sku",
        "status",
        "updatedAt",
    ),
    views={
        "published": _status_view("published"),
        "draft": _status_view("draft"),
        "archived": _status_view("archived"),
    },
    filter_properties=(
        _prop("name", "Name", "string"),
        _prop("sku", "SKU", "string"),
        _prop("category", "Category", "string"),
        _prop("brand", "Brand", "string"),
        _prop("status", "Status", "string"),
        _prop("createdAt", "Created", "date"),
        _prop("updatedAt", "Updated", "date"),
        _prop("price", "Price", "number"),
    ),
)

RESOURCES: dict[str, ResourceDefinition] = {
    resource.name: resource for resource in (CUSTOMERS, ORDERS, INVOICES, PRODUCTS)
}


def get_resource(name: str) -> ResourceDefinition:
    resource = RESOURCES.get(str(name or "").strip().lower())
    if resource is None:
        raise UnknownResourceError(f'Unknown resource "{name}"')
    return resource
