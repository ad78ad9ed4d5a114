"""Copy engine: options, session, recursive copy task, and entry point.

Architecture Note:
    copier.Copier is the only recovery boundary. task.copy_record and the
    relationship copier propagate every error; the copier rolls back the
    session and re-raises.
"""

from recordcopy.cloning.copier import Copier, get_copier, set_copier
from recordcopy.cloning.options import (
    CopyOptions,
    CopyTrace,
    OptionsLike,
    coerce_options,
    resolve_options,
)
from recordcopy.cloning.relationships import copy_relationships, link_relationship
from recordcopy.cloning.session import CopySession
from recordcopy.cloning.task import clone_value, copy_attributes, copy_record

__all__ = [
    # Entry point
    "Copier",
    "get_copier",
    "set_copier",
    # Options
    "CopyOptions",
    "CopyTrace",
    "OptionsLike",
    "coerce_options",
    "resolve_options",
    # Session
    "CopySession",
    # Task
    "copy_record",
    "copy_attributes",
    "clone_value",
    "copy_relationships",
    "link_relationship",
]
