"""Utilities for handling Atlassian Document Format (ADF)."""

from typing import Any, Callable, Dict, List, Optional

Node = Dict[str, Any]

BULLET = "• "


def _children(node: Node) -> Optional[List[Node]]:
    content = node.get("content")
    if isinstance(content, list):
        return content
    return None


def _concat(children: List[Node]) -> str:
    return "".join(extract_text_from_node(child) for child in children)


def _text(node: Node) -> str:
    return node.get("text") or ""


def _hard_break(node: Node) -> str:  # pylint: disable=unused-argument
    return "\n"


def _paragraph(node: Node) -> Optional[str]:
    children = _children(node)
    return _concat(children) if children is not None else None


def _list(node: Node) -> Optional[str]:
    # Ordered lists are rendered like bullet lists, without numbering.
    children = _children(node)
    if children is None:
        return None
    return "\n".join(extract_text_from_node(child) for child in children)


def _list_item(node: Node) -> Optional[str]:
    children = _children(node)
    return f"{BULLET}{_concat(children)}" if children is not None else None


NODE_HANDLERS: Dict[str, Callable[[Node], Optional[str]]] = {
    "text": _text,
    "hardBreak": _hard_break,
    "paragraph": _paragraph,
    "bulletList": _list,
    "orderedList": _list,
    "listItem": _list_item,
}


def extract_text_from_node(node: Optional[Node]) -> str:
    """Flatten one ADF node into plain text.

    Known node kinds have their own rule; a kind whose handler cannot apply
    (for instance a paragraph without content) and any unknown kind fall
    back to concatenating its children, or to an empty string when it has
    none.
    """
    if not node or not isinstance(node, dict):
        return ""

    handler = NODE_HANDLERS.get(node.get("type", ""))
    if handler is not None:
        text = handler(node)
        if text is not None:
            return text

    children = _children(node)
    if children is not None:
        return _concat(children)
    return ""


def extract_comment_text(body: Optional[Node]) -> str:
    """Extract plain text from a comment body document.

    Top-level blocks are separated by newlines and the result is stripped.
    """
    if not body or not isinstance(body, dict) or not body.get("content"):
        return ""
    return "\n".join(extract_text_from_node(node) for node in body["content"]).strip()


def create_adf_from_text(text: str) -> Dict[str, Any]:
    """Wrap plain text into a single-paragraph ADF document."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }
