"""
Boundary payload schemas.

Trees cross the boundary as plain dicts using camelCase field names. These
pydantic models check the shape of incoming payloads and turn them into
Node objects; anything that does not fit is reported as a DecodeError.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)

from ..utils.error_handler import DecodeError
from .data_models import DuplicateGroup, Node

logger = logging.getLogger(__name__)


class NodePayload(BaseModel):
    """Shape of a node (and its subtree) at the boundary."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: StrictStr
    parent_id: Optional[StrictStr] = Field(default=None, alias="parentId")
    title: StrictStr
    url: Optional[StrictStr] = None
    add_date: StrictInt = Field(default=0, alias="addDate", ge=0)
    last_modified: StrictInt = Field(default=0, alias="lastModified", ge=0)
    icon: Optional[StrictStr] = None
    tags: List[StrictStr] = Field(default_factory=list)
    is_duplicate: StrictBool = Field(default=False, alias="isDuplicate")
    children: List["NodePayload"] = Field(default_factory=list)


class NewNodePayload(NodePayload):
    """A node handed to ``add``; its id is minted by the operation."""

    id: Optional[StrictStr] = None
    title: StrictStr = ""


class UpdatePayload(BaseModel):
    """
    Partial update for a single node.

    Only keys present in the payload are applied. An explicit null for
    ``url`` or ``icon`` clears the field; unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: StrictStr = ""
    url: Optional[StrictStr] = None
    tags: List[StrictStr] = Field(default_factory=list)
    icon: Optional[StrictStr] = None
    is_duplicate: StrictBool = Field(default=False, alias="isDuplicate")


NodePayload.model_rebuild()
NewNodePayload.model_rebuild()

_TREE_ADAPTER = TypeAdapter(List[NodePayload])


def _decode_error(error: ValidationError, what: str) -> DecodeError:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        problems.append({"location": location, "message": detail["msg"]})
    logger.debug(f"Rejected {what} payload with {len(problems)} problem(s)")
    return DecodeError(f"Invalid {what} payload", errors=problems)


def _payload_to_node(payload: NodePayload) -> Node:
    def convert(item: NodePayload) -> Node:
        return Node(
            id=item.id,
            title=item.title,
            url=item.url,
            add_date=item.add_date,
            last_modified=item.last_modified,
            icon=item.icon,
            tags=list(item.tags),
            is_duplicate=item.is_duplicate,
            parent_id=item.parent_id,
        )

    root = convert(payload)
    stack = [(payload, root)]
    while stack:
        item, node = stack.pop()
        for child_item in item.children:
            child = convert(child_item)
            node.children.append(child)
            stack.append((child_item, child))
    return root


def decode_node(data: Any) -> Node:
    """
    Decode a single node payload.

    Raises:
        DecodeError: If the payload does not match the node shape
    """
    try:
        payload = NodePayload.model_validate(data)
    except ValidationError as e:
        raise _decode_error(e, "node") from e
    return _payload_to_node(payload)


def decode_new_node(data: Any) -> Node:
    """Decode the node handed to ``add``; a missing id becomes an empty string."""
    try:
        payload = NewNodePayload.model_validate(data)
    except ValidationError as e:
        raise _decode_error(e, "node") from e
    node = _payload_to_node(payload)
    node.id = node.id or ""
    return node


def decode_tree(data: Any) -> List[Node]:
    """
    Decode a tree payload (a list of top-level nodes).

    A single node dict is accepted and treated as a one-element tree.

    Raises:
        DecodeError: If the payload does not match the tree shape
    """
    if isinstance(data, dict):
        data = [data]
    try:
        payloads = _TREE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise _decode_error(e, "tree") from e
    return [_payload_to_node(payload) for payload in payloads]


def decode_tree_json(text: Union[str, bytes]) -> List[Node]:
    """
    Decode a JSON document produced by the JSON serializer.

    Raises:
        DecodeError: If the text is not JSON or does not match the tree shape
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid JSON document: {e}") from e
    return decode_tree(data)


def decode_updates(data: Any) -> Dict[str, Any]:
    """
    Decode a partial update payload.

    Returns:
        Dict of snake_case field names to new values, holding only the
        fields explicitly present in the payload

    Raises:
        DecodeError: If a present field has the wrong type
    """
    try:
        payload = UpdatePayload.model_validate(data)
    except ValidationError as e:
        raise _decode_error(e, "update") from e
    return {name: getattr(payload, name) for name in payload.model_fields_set}


def encode_tree(tree: List[Node]) -> List[Dict[str, Any]]:
    """Encode a tree as a list of boundary dicts."""
    return [node.to_dict() for node in tree]


def encode_duplicate_groups(groups: List[DuplicateGroup]) -> List[Dict[str, Any]]:
    """Encode duplicate groups as boundary dicts."""
    return [group.to_dict() for group in groups]
