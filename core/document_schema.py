"""
Document Schema Declarations

Binds a document collection to the pydantic model that validates its
documents, plus the index/reference metadata document stores need to
plan indexes and check references.

Usage:
    from core.document_schema import CollectionSchema, FieldSpec

    PRODUCT_SCHEMA = CollectionSchema(name="products", model=Product)
    document = PRODUCT_SCHEMA.validate({"id": "prod_1", "name": "Lamp"})
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

# pydantic error types that mean "no usable value"
_MISSING_ERRORS = {"missing", "string_too_short", "too_short"}


class DocumentValidationError(Exception):
    """Document failed schema validation on save"""

    def __init__(self, collection: str, errors: Mapping[str, str]):
        self.collection = collection
        self.errors = dict(errors)
        details = "; ".join(f"{path}: {message}" for path, message in self.errors.items())
        super().__init__(f"{collection} validation failed: {details}")


def _error_messages(error: ValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into one message per top-level document key"""
    messages: Dict[str, str] = {}
    for item in error.errors():
        path = str(item["loc"][0]) if item["loc"] else "__root__"
        if path in messages:
            continue

        kind = item["type"]
        if kind in _MISSING_ERRORS and len(item["loc"]) == 1:
            messages[path] = f"Path `{path}` is required"
        elif kind == "extra_forbidden":
            messages[path] = f"Path `{path}` is not in schema"
        elif kind == "enum":
            messages[path] = f"`{item['input']}` is not a valid enum value for path `{path}`"
        else:
            messages[path] = f"Path `{path}`: {item['msg']}"
    return messages


@dataclass(frozen=True)
class FieldSpec:
    """Storage metadata for one document field"""
    name: str
    indexed: bool = False
    ref: Optional[str] = None  # target collection for reference fields
    many: bool = False  # list of values rather than a scalar


@dataclass(frozen=True)
class CollectionSchema:
    """Immutable shape of one document collection"""
    name: str
    model: Type[BaseModel]
    fields: Tuple[FieldSpec, ...] = ()
    primary_key: str = "id"

    def __post_init__(self):
        names = self.field_names
        if self.primary_key not in names:
            raise ValueError(f"Schema {self.name} has no primary key field '{self.primary_key}'")
        for spec in self.fields:
            if spec.name not in names:
                raise ValueError(f"Schema {self.name} declares metadata for unknown field '{spec.name}'")

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def field_names(self) -> Tuple[str, ...]:
        """Document keys, using aliases where the model declares them"""
        return tuple(
            info.alias or name for name, info in self.model.model_fields.items()
        )

    @property
    def indexed_fields(self) -> Tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.indexed)

    @property
    def references(self) -> Tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.ref)

    def is_list(self, name: str) -> bool:
        spec = self.field(name)
        return bool(spec and spec.many)

    def validate(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate a document with the collection model.

        Returns:
            JSON-ready copy keyed by document keys, model defaults applied
            and unset optional fields left out

        Raises:
            DocumentValidationError: missing or blank required values,
                unknown fields (when the model forbids extras), type or
                enum violations
        """
        try:
            instance = self.model.model_validate(dict(document))
        except ValidationError as e:
            raise DocumentValidationError(self.name, _error_messages(e)) from None
        return instance.model_dump(mode="json", by_alias=True, exclude_none=True)

    def normalize_filter(self, query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Check filter keys against the schema and unwrap enum values"""
        normalized: Dict[str, Any] = {}
        for key, value in (query or {}).items():
            if key not in self.field_names:
                raise ValueError(f"Cannot filter {self.name} on unknown field '{key}'")
            normalized[key] = value.value if isinstance(value, Enum) else value
        return normalized
