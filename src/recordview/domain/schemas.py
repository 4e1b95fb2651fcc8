"""Schema presets for the collections the record view is used with."""

from recordview.domain.entities import LINE_TOTAL, RecordSchema, SortField, SortKind
from recordview.domain.errors import ValidationError

EXPENSES = RecordSchema(
    name="expenses",
    item_name="expense",
    search_fields=("name", "category"),
    filter_fields={"category": "category"},
    sort_fields={
        "category": SortField("category", SortKind.STRING),
        "name": SortField("name", SortKind.STRING),
        "date": SortField("date", SortKind.DATE),
        "amount": SortField("amount", SortKind.NUMBER),
    },
    default_sort="date_desc",
    scope_field="userId",
)

PAYMENTS = RecordSchema(
    name="payments",
    item_name="payment",
    search_fields=("semester", "courseName"),
    filter_fields={"semester": "semester", "course": "courseName"},
    sort_fields={
        "course": SortField("courseName", SortKind.STRING),
        "date": SortField("date", SortKind.DATE),
        "amount": SortField("amount", SortKind.NUMBER),
    },
    default_sort="date_desc",
    scope_field="userId",
)

MOVIES = RecordSchema(
    name="movies",
    item_name="movie",
    search_fields=("title", "description", "country"),
    filter_fields={"genre": "genreId", "country": "country"},
    sort_fields={
        "title": SortField("title", SortKind.STRING),
        "year": SortField("year", SortKind.NUMBER),
        "duration": SortField("duration", SortKind.NUMBER),
    },
    default_sort="title_asc",
)

PRODUCTS = RecordSchema(
    name="products",
    item_name="product",
    search_fields=("name", "description"),
    filter_fields={"category": "category", "brand": "brand"},
    sort_fields={
        "name": SortField("name", SortKind.STRING),
        "price": SortField("price", SortKind.NUMBER),
    },
    default_sort="name_asc",
    amount_field="price",
)

CART_ITEMS = RecordSchema(
    name="cart",
    item_name="cart item",
    search_fields=("name",),
    filter_fields={},
    sort_fields={
        "name": SortField("name", SortKind.STRING),
        "price": SortField("price", SortKind.NUMBER),
        "quantity": SortField("quantity", SortKind.NUMBER),
        "total": SortField(LINE_TOTAL, SortKind.NUMBER),
    },
    default_sort="name_asc",
    scope_field="userId",
    amount_field="price",
    quantity_field="quantity",
)

SCHEMAS: dict[str, RecordSchema] = {
    schema.name: schema for schema in (EXPENSES, PAYMENTS, MOVIES, PRODUCTS, CART_ITEMS)
}


def get_schema(name: str) -> RecordSchema:
    """Look up a schema preset by collection name.

    Raises:
        ValidationError: If no preset has that name
    """
    try:
        return SCHEMAS[name]
    except KeyError:
        known = ", ".join(sorted(SCHEMAS))
        raise ValidationError(f"Unknown schema '{name}'. Known schemas: {known}") from None
