"""Exception hierarchy for recordcopy.

All errors raised by the package derive from RecordCopyError, so callers can
catch the whole family in one place:

    try:
        clone = await post.copy(deep=True)
    except RecordCopyError:
        ...
"""


class RecordCopyError(Exception):
    """Base class for recordcopy errors."""


class SchemaError(RecordCopyError, TypeError):
    """Raised when a model declaration is invalid."""


class UnknownModelError(RecordCopyError, LookupError):
    """Raised when a model name is not registered."""


class TransformNotFoundError(RecordCopyError, LookupError):
    """Raised when no transform is registered for an attribute type."""


class LinkUnsupportedError(RecordCopyError):
    """Raised when a store cannot link existing members into a relationship.

    The relationship copier treats this as a signal to fall back to a plain
    reference assignment; it never escapes a copy.
    """


class StaleRecordError(RecordCopyError):
    """Raised when reading relationships of a record that was unloaded."""
