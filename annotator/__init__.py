"""Annotator - parse and serialize annotated Tibetan documents."""

__version__ = "0.1.0"

from .codec import decode, encode
from .document import DocumentParser, parse_document, parse_response, process_block
from .hierarchy import build_hierarchy
from .models import Analysis, AnnotationNode, Block, Line, Unit, VerbEntry
from .reconciler import reconcile
from .serializer import serialize_block, serialize_document
from .verbs import VerbIndex

__all__ = [
    "decode",
    "encode",
    "DocumentParser",
    "parse_document",
    "parse_response",
    "process_block",
    "build_hierarchy",
    "reconcile",
    "serialize_block",
    "serialize_document",
    "Analysis",
    "AnnotationNode",
    "Block",
    "Line",
    "Unit",
    "VerbEntry",
    "VerbIndex",
]
