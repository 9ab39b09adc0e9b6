"""Handler lookup by name."""

from api_doc_builder.errors import ConfigError
from api_doc_builder.handler.base import TreeHandler
from api_doc_builder.handler.html import HtmlTreeHandler
from api_doc_builder.handler.markup import AsciidocTreeHandler, MarkdownTreeHandler
from api_doc_builder.handler.postman import PostmanTreeHandler

HANDLERS: dict[str, type[TreeHandler]] = {
    cls.name: cls
    for cls in (MarkdownTreeHandler, AsciidocTreeHandler, HtmlTreeHandler, PostmanTreeHandler)
}

DEFAULT_PIPELINE = ["markdown", "html"]


def get_handler(name: str) -> TreeHandler:
    """Return a fresh instance of the handler registered as ``name``."""
    try:
        return HANDLERS[name]()
    except KeyError:
        raise ConfigError(f"Unknown handler {name!r}, expected one of: {', '.join(HANDLERS)}") from None


def get_handlers(names: list[str]) -> list[TreeHandler]:
    return [get_handler(name) for name in names]
