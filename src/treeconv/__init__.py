"""treeconv — convert typed values to JSON/YAML value trees and back."""

from treeconv.conversion import (
    ConverterRegistry,
    decode,
    default_registry,
    deserialize,
    encode,
    load_file,
    register_record,
    save_file,
    serialize,
)
from treeconv.domain.errors import ConversionError, UnresolvableType
from treeconv.domain.tree import Node, Record, Scalar, Sequence

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "ConverterRegistry",
    "Node",
    "Record",
    "Scalar",
    "Sequence",
    "UnresolvableType",
    "__version__",
    "decode",
    "default_registry",
    "deserialize",
    "encode",
    "load_file",
    "register_record",
    "save_file",
    "serialize",
]
