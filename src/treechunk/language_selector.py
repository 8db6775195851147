"""Pick the first grammar whose parse of a document looks successful.

Grammars are poor validators of "is this the right language": many will
partially parse the wrong language. The check here is therefore permissive
and depends on registry order, with the document's extension hint tried
first.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from .Document import Document
from .language_registry import (
    ERROR_AT_BOTH,
    ERROR_AT_FIRST_CHILD,
    ERROR_AT_ROOT,
    LanguageRegistry,
    ParseError,
    ParserTimeout,
    SyntaxNode,
)

logger = logging.getLogger(__name__)

ERROR_NODE_TYPE = "ERROR"


def select(
        document: Document,
        registry: LanguageRegistry,
        timeout_s: Optional[float] = None,
) -> Optional[Tuple[SyntaxNode, str]]:
    """
    Return (root, language name) for the first entry that parses the document
    successfully, or None when every entry fails or times out.
    """
    extension = document.extension
    for entry in registry.prioritized(extension):
        try:
            root = entry.provider.parse(document.contents, timeout_s or None)
        except ParserTimeout:
            logger.warning("Parser for %s timed out after %.2fs; trying next language", entry.name, timeout_s)
            continue
        except ParseError as e:
            logger.debug("Parser for %s failed: %s", entry.name, e)
            continue

        if is_successful_parse(root, entry.error_position):
            logger.debug("Selected %s (hint=%r)", entry.name, extension)
            return root, entry.name
        logger.debug("Parse with %s rejected by error check (%s)", entry.name, entry.error_position)
    return None


def is_successful_parse(root: Optional[SyntaxNode], error_position: str = ERROR_AT_BOTH) -> bool:
    """
    A parse succeeds if the root exists and neither checked position carries
    an error marker. The first child is only inspected when there is one.
    """
    if root is None:
        return False
    if error_position in (ERROR_AT_ROOT, ERROR_AT_BOTH) and is_error_node(root):
        return False
    if error_position in (ERROR_AT_FIRST_CHILD, ERROR_AT_BOTH):
        children = root.children
        if children and is_error_node(children[0]):
            return False
    return True


def is_error_node(node: SyntaxNode) -> bool:
    return bool(getattr(node, "is_error", False)) or node.type == ERROR_NODE_TYPE


__all__ = ["ParserTimeout", "select", "is_successful_parse", "is_error_node"]
