"""
Order Collection Schemas

Binds the order and product collections to their document models and
declares what the store indexes and which fields reference other
collections. Built once at import and never mutated.
"""

from core.document_schema import CollectionSchema, FieldSpec

from .models import Order, Product, generate_order_id


def build_product_schema(collection: str = "products") -> CollectionSchema:
    return CollectionSchema(name=collection, model=Product)


def build_order_schema(
    collection: str = "orders", product_collection: str = "products"
) -> CollectionSchema:
    return CollectionSchema(
        name=collection,
        model=Order,
        fields=(
            FieldSpec("products", indexed=True, ref=product_collection, many=True),
            FieldSpec("status", indexed=True),
        ),
    )


ORDER_SCHEMA = build_order_schema()
PRODUCT_SCHEMA = build_product_schema()

__all__ = [
    "ORDER_SCHEMA",
    "PRODUCT_SCHEMA",
    "build_order_schema",
    "build_product_schema",
    "generate_order_id",
]
