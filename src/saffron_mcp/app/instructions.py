"""
Recipe instruction transcoder.

Saffron stores recipe instructions as a serialized legacy Slate document::

    {"document": {"nodes": [
        {"object": "block", "type": "header-four",
         "nodes": [{"object": "text", "text": "Preparation"}]},
        {"object": "block", "type": "paragraph",
         "nodes": [{"object": "text", "text": "Preheat the oven"}]}
    ]}}

Tools expose the much simpler flat list of ``{"type", "text"}`` steps
instead. This module converts between the two. Only the restricted shape
above (one text leaf per block) is produced or accepted.
"""

import json
from typing import Annotated, Any, List, Literal

from pydantic import BaseModel, Field, PlainSerializer

from saffron_mcp.app.errors import MalformedDocument

# Slate block type used for each instruction kind.
_HEADER_BLOCK = "header-four"
_PARAGRAPH_BLOCK = "paragraph"


class Instruction(BaseModel):
    """A single instruction step: a section header or a paragraph of text."""

    type: Literal["header", "paragraph"]
    text: str


def encode_instructions(steps: List[Instruction]) -> str:
    """Serialize instruction steps into a legacy Slate document string."""
    nodes = [
        {
            "object": "block",
            "type": _HEADER_BLOCK if step.type == "header" else _PARAGRAPH_BLOCK,
            "nodes": [{"object": "text", "text": step.text}],
        }
        for step in steps
    ]
    return json.dumps(
        {"document": {"nodes": nodes}},
        ensure_ascii=False,
        separators=(",", ":"),
    )


def decode_instructions(serialized: str) -> List[Instruction]:
    """
    Parse a legacy Slate document string back into instruction steps.

    Raises:
        MalformedDocument: If the string is not JSON or any part of the
            document does not have the expected shape.
    """
    try:
        value = json.loads(serialized)
    except (TypeError, ValueError) as exc:
        raise MalformedDocument(f"instructions are not valid JSON: {exc}") from exc

    document = value.get("document") if isinstance(value, dict) else None
    if not isinstance(document, dict):
        raise MalformedDocument("instructions have no document")
    nodes = document.get("nodes")
    if not isinstance(nodes, list):
        raise MalformedDocument("instructions document has no block list")

    return [_decode_block(index, node) for index, node in enumerate(nodes)]


def _decode_block(index: int, node: Any) -> Instruction:
    if not isinstance(node, dict):
        raise MalformedDocument(f"block {index} is not an object")
    leaves = node.get("nodes")
    if not isinstance(leaves, list) or len(leaves) != 1:
        raise MalformedDocument(f"block {index} must contain exactly one text node")
    leaf = leaves[0]
    if not isinstance(leaf, dict) or not isinstance(leaf.get("text"), str):
        raise MalformedDocument(f"block {index} has no text")

    kind = "header" if node.get("type") == _HEADER_BLOCK else "paragraph"
    return Instruction(type=kind, text=leaf["text"])


# Field type for tool inputs: validated as a list of steps, dumped as the
# serialized document the backend expects.
InstructionList = Annotated[
    List[Instruction],
    PlainSerializer(encode_instructions, return_type=str),
    Field(description="The instructions for the recipe"),
]
