"""Model registry, decorator, and schema introspection.

Usage:
    @model
    class Post(Record):
        title = attr("string")
        comments = has_many("comment")

    @model(name="blog-comment", copyable=False)
    class Comment(Record):
        body = attr("string")

    each_attribute(post, lambda name, meta: print(name, meta.type))
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable
from typing import overload

from recordcopy.core.exceptions import SchemaError, UnknownModelError
from recordcopy.core.schema.fields import Attribute, Relationship
from recordcopy.core.schema.models import AttributeMeta, ModelMeta, RelationshipMeta
from recordcopy.core.schema.record import Record

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _stable_model_type_id(cls: type) -> int:
    """Generate deterministic ID from fully qualified class name.

    Args:
        cls: Model class to generate ID for.

    Returns:
        Deterministic integer ID derived from class name hash.
    """
    fqn = f"{cls.__module__}.{cls.__qualname__}"
    return int(hashlib.sha256(fqn.encode()).hexdigest()[:16], 16)


def default_model_name(cls: type) -> str:
    """Derive a model name from a class name: BlogPost -> blog_post."""
    return _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()


def _collect_fields(
    cls: type,
) -> tuple[tuple[AttributeMeta, ...], tuple[RelationshipMeta, ...]]:
    """Gather field declarations in definition order, base classes first."""
    attributes: dict[str, AttributeMeta] = {}
    relationships: dict[str, RelationshipMeta] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, Attribute):
                relationships.pop(name, None)
                attributes[name] = value.meta
            elif isinstance(value, Relationship):
                attributes.pop(name, None)
                relationships[name] = value.meta
    return tuple(attributes.values()), tuple(relationships.values())


class ModelRegistry:
    """Process-local registry mapping model names to record classes."""

    def __init__(self) -> None:
        """Initialize empty model registry."""
        self._by_type: dict[type, ModelMeta] = {}
        self._by_name: dict[str, type[Record]] = {}

    def register(
        self, cls: type[Record], name: str | None = None, copyable: bool = True
    ) -> ModelMeta:
        """Register a record class and return its metadata.

        Args:
            cls: Record subclass to register.
            name: Model name; derived from the class name when omitted.
            copyable: Whether records of this model expose the copy capability.

        Returns:
            Model metadata including fields.

        Raises:
            SchemaError: If the name is already taken by another class.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        model_name = name or default_model_name(cls)
        existing = self._by_name.get(model_name)
        if existing is not None and existing is not cls:
            raise SchemaError(
                f"Model name collision: {cls.__qualname__} and {existing.__qualname__} "
                f"both claim '{model_name}'"
            )

        attributes, relationships = _collect_fields(cls)
        meta = ModelMeta(
            model_type_id=_stable_model_type_id(cls),
            model_name=model_name,
            attributes=attributes,
            relationships=relationships,
            copyable=copyable,
        )
        self._by_type[cls] = meta
        self._by_name[model_name] = cls
        return meta

    def get_meta(self, cls: type) -> ModelMeta | None:
        return self._by_type.get(cls)

    def model_for(self, model_name: str) -> type[Record]:
        """Look up the record class registered under `model_name`.

        Raises:
            UnknownModelError: If no model has that name.
        """
        try:
            return self._by_name[model_name]
        except KeyError:
            raise UnknownModelError(f"No model named '{model_name}' is registered") from None

    def is_registered(self, cls: type) -> bool:
        return cls in self._by_type


# Module-level registry instance
_registry = ModelRegistry()


def get_registry() -> ModelRegistry:
    """Access the global model registry.

    Returns:
        The process-local ModelRegistry instance.
    """
    return _registry


@overload
def model(cls: type[Record]) -> type[Record]: ...


@overload
def model(
    cls: None = None, *, name: str | None = None, copyable: bool = True
) -> Callable[[type[Record]], type[Record]]: ...


def model(
    cls: type[Record] | None = None,
    *,
    name: str | None = None,
    copyable: bool = True,
) -> type[Record] | Callable[[type[Record]], type[Record]]:
    """Register a Record subclass as a model.

    Supports three forms:
        @model                          # bare decorator
        @model()                        # parenthesized, no args
        @model(name="post", copyable=False)

    Args:
        cls: The class to register, or None if called with arguments.
        name: Model name used by the store; defaults to snake_case class name.
        copyable: If False, related records of this model are always linked
            by reference, never cloned.

    Returns:
        Decorated class or decorator function.

    Raises:
        SchemaError: If the class is not a Record subclass.
    """

    def decorator(c: type[Record]) -> type[Record]:
        if not (isinstance(c, type) and issubclass(c, Record)):
            raise SchemaError(f"Model {c!r} must subclass Record")
        c.__model_meta__ = _registry.register(c, name=name, copyable=copyable)
        return c

    if cls is None:
        return decorator
    return decorator(cls)


def is_copyable_record(value: object) -> bool:
    """True if `value` is a record whose model exposes the copy capability."""
    return isinstance(value, Record) and value.__model_meta__.copyable


def each_attribute(record: Record, fn: Callable[[str, AttributeMeta], None]) -> None:
    """Call fn(name, meta) for each declared attribute, in declaration order."""
    for meta in record.__model_meta__.attributes:
        fn(meta.name, meta)


def each_relationship(record: Record, fn: Callable[[str, RelationshipMeta], None]) -> None:
    """Call fn(name, meta) for each declared relationship, in declaration order."""
    for meta in record.__model_meta__.relationships:
        fn(meta.name, meta)
