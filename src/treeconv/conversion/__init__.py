"""Conversion layer — typed values to value trees and back.

Depends on the domain layer (tree, errors, aggregate types) and on the
document codecs for the stream entry points.
"""

from treeconv.conversion.defaults import create_registry, decode, default_registry, encode
from treeconv.conversion.records import register_record
from treeconv.conversion.registry import Converter, ConverterRegistry
from treeconv.conversion.streams import deserialize, load_file, save_file, serialize

__all__ = [
    "Converter",
    "ConverterRegistry",
    "create_registry",
    "decode",
    "default_registry",
    "deserialize",
    "encode",
    "load_file",
    "register_record",
    "save_file",
    "serialize",
]
