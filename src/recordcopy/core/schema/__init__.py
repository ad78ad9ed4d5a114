"""Schema functionality: record base class, field declarations, and registry."""

from recordcopy.core.schema.core import (
    ModelRegistry,
    default_model_name,
    each_attribute,
    each_relationship,
    get_registry,
    is_copyable_record,
    model,
)
from recordcopy.core.schema.fields import Attribute, Relationship, attr, belongs_to, has_many
from recordcopy.core.schema.models import (
    AttributeMeta,
    CopyableValue,
    ModelMeta,
    RelationshipKind,
    RelationshipMeta,
    RelationshipState,
)
from recordcopy.core.schema.record import Record

__all__ = [
    # Models
    "AttributeMeta",
    "RelationshipMeta",
    "RelationshipKind",
    "RelationshipState",
    "ModelMeta",
    "CopyableValue",
    # Fields
    "Attribute",
    "Relationship",
    "attr",
    "belongs_to",
    "has_many",
    # Core
    "Record",
    "model",
    "get_registry",
    "ModelRegistry",
    "default_model_name",
    "each_attribute",
    "each_relationship",
    "is_copyable_record",
]
