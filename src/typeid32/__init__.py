"""TypeIDs - sortable, prefixed identifiers with a canonical base32 text form."""

from __future__ import annotations

from typeid32.errors import ErrorKind, PrefixMismatchError, TypeIDError
from typeid32.provider import (
    StdlibUUIDProvider,
    UUIDProvider,
    default_provider,
    get_default_provider,
    set_default_provider,
)
from typeid32.typeid import TypeID, TypeIDType, _get_prefix, factory, parser
from typeid32.validated import Invalid, Valid, Validated


__all__ = [
    "ErrorKind",
    "Invalid",
    "PrefixMismatchError",
    "StdlibUUIDProvider",
    "TypeID",
    "TypeIDError",
    "TypeIDType",
    "UUIDProvider",
    "Valid",
    "Validated",
    "_get_prefix",
    "default_provider",
    "factory",
    "get_default_provider",
    "parser",
    "set_default_provider",
]
