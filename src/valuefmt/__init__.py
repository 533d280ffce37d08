"""valuefmt - render arbitrary values as JSON, YAML, tables or plain text."""

from valuefmt.codec import to_plain
from valuefmt.core import Kind, Ref, classify, deref, stringify
from valuefmt.exceptions import (
    EncodingError,
    QueryCompileError,
    QueryEvaluationError,
    RenderDepthError,
    RenderError,
    UnsupportedTypeError,
)
from valuefmt.formatters import CompositeFormatter, Formatter
from valuefmt.meta import Field, TagResolver, record_items, tag
from valuefmt.writers import (
    JMESPathWriter,
    JQWriter,
    JSONWriter,
    PassthroughWriter,
    QueryArg,
    TableWriter,
    TemplateWriter,
    TextWriter,
    ValueWriter,
    YAMLWriter,
    auto_json,
    get_writer,
    list_writers,
    register_writer,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Kind",
    "Ref",
    "classify",
    "deref",
    "stringify",
    "to_plain",
    # Metadata
    "Field",
    "TagResolver",
    "record_items",
    "tag",
    # Formatters
    "Formatter",
    "CompositeFormatter",
    # Writers
    "ValueWriter",
    "JSONWriter",
    "YAMLWriter",
    "TextWriter",
    "TableWriter",
    "PassthroughWriter",
    "TemplateWriter",
    "JQWriter",
    "JMESPathWriter",
    "QueryArg",
    "auto_json",
    "get_writer",
    "list_writers",
    "register_writer",
    # Errors
    "RenderError",
    "UnsupportedTypeError",
    "EncodingError",
    "RenderDepthError",
    "QueryCompileError",
    "QueryEvaluationError",
]
