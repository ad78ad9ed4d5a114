"""Core functionalities: identity, schema, transforms, and shared types.

Architecture Note:
    core/ holds the record model and the building blocks the copy engine
    consumes. Stateful services live in storage/ and cloning/.
"""

from recordcopy.core.exceptions import (
    LinkUnsupportedError,
    RecordCopyError,
    SchemaError,
    StaleRecordError,
    TransformNotFoundError,
    UnknownModelError,
)
from recordcopy.core.identity import RecordId
from recordcopy.core.schema import (
    AttributeMeta,
    CopyableValue,
    ModelMeta,
    ModelRegistry,
    Record,
    RelationshipKind,
    RelationshipMeta,
    attr,
    belongs_to,
    each_attribute,
    each_relationship,
    get_registry,
    has_many,
    is_copyable_record,
    model,
)
from recordcopy.core.transform import (
    PRIMITIVE_TYPES,
    DateTimeTransform,
    DateTransform,
    DecimalTransform,
    JsonTransform,
    ModelTransform,
    Transform,
    TransformRegistry,
    default_transforms,
    get_transform,
    get_transform_registry,
)
from recordcopy.core.types import Clone

__all__ = [
    # Types
    "Clone",
    # Identity
    "RecordId",
    # Errors
    "RecordCopyError",
    "SchemaError",
    "UnknownModelError",
    "TransformNotFoundError",
    "LinkUnsupportedError",
    "StaleRecordError",
    # Schema
    "Record",
    "model",
    "attr",
    "belongs_to",
    "has_many",
    "get_registry",
    "ModelRegistry",
    "ModelMeta",
    "AttributeMeta",
    "RelationshipMeta",
    "RelationshipKind",
    "CopyableValue",
    "each_attribute",
    "each_relationship",
    "is_copyable_record",
    # Transforms
    "PRIMITIVE_TYPES",
    "Transform",
    "TransformRegistry",
    "DateTransform",
    "DateTimeTransform",
    "DecimalTransform",
    "JsonTransform",
    "ModelTransform",
    "default_transforms",
    "get_transform",
    "get_transform_registry",
]
