"""recordcopy: deep and shallow copies of record graphs.

Usage:
    from recordcopy import LocalStore, Record, attr, belongs_to, has_many, model

    @model
    class User(Record):
        name = attr("string")

    @model
    class Comment(Record):
        body = attr("string")
        author = belongs_to("user")

    @model
    class Post(Record):
        title = attr("string")
        tags = attr("array")
        comments = has_many("comment")

    store = LocalStore()
    ada = store.create_record("user", name="ada")
    post = store.create_record(
        "post",
        title="x",
        tags=["a"],
        comments=[store.create_record("comment", body="hi", author=ada)],
    )

    clone = await post.copy(deep=True, options={"ignore_attributes": ["tags"]})
"""

__version__ = "0.1.0"

# Configuration
from recordcopy.config import CopySettings

# Copy engine
from recordcopy.cloning import (
    Copier,
    CopyOptions,
    CopySession,
    CopyTrace,
    copy_record,
    get_copier,
    set_copier,
)

# Core primitives
from recordcopy.core import (
    Clone,
    CopyableValue,
    LinkUnsupportedError,
    ModelTransform,
    Record,
    RecordCopyError,
    RecordId,
    RelationshipKind,
    SchemaError,
    StaleRecordError,
    Transform,
    TransformNotFoundError,
    TransformRegistry,
    UnknownModelError,
    attr,
    belongs_to,
    each_attribute,
    each_relationship,
    has_many,
    model,
)

# Logging
from recordcopy.core.logging_config import configure_logging, get_logger

# Storage
from recordcopy.storage import (
    LocalStore,
    Store,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Clone",
    "RecordId",
    "Record",
    "model",
    "attr",
    "belongs_to",
    "has_many",
    "RelationshipKind",
    "CopyableValue",
    "each_attribute",
    "each_relationship",
    "Transform",
    "TransformRegistry",
    "ModelTransform",
    # Errors
    "RecordCopyError",
    "SchemaError",
    "UnknownModelError",
    "TransformNotFoundError",
    "LinkUnsupportedError",
    "StaleRecordError",
    # Copy engine
    "Copier",
    "CopyOptions",
    "CopySession",
    "CopyTrace",
    "copy_record",
    "get_copier",
    "set_copier",
    # Storage
    "Store",
    "LocalStore",
    # Config
    "CopySettings",
    # Logging
    "configure_logging",
    "get_logger",
]
