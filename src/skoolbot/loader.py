"""Load block trees from Blockly's JSON serialization."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from skoolbot.blocks import Block, Workspace
from skoolbot.errors import BlockLoadError

logger = logging.getLogger(__name__)


def load_workspace(path: Path) -> Workspace:
    """Read a ``.json`` blocks file."""
    return loads_workspace(path.read_text(), str(path))


def loads_workspace(text: str, source: str = "<string>") -> Workspace:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BlockLoadError(f"invalid JSON: {e.msg} (line {e.lineno})", source=source) from e
    return workspace_from_json(data, source)


def workspace_from_json(data: Any, source: str = "<string>") -> Workspace:
    """Accept a full workspace object, a bare list of blocks, or one block."""
    if isinstance(data, list):
        top, variables = data, []
    elif isinstance(data, dict) and "type" in data:
        top, variables = [data], []
    elif isinstance(data, dict):
        blocks_section = data.get("blocks", {})
        if isinstance(blocks_section, dict):
            top = blocks_section.get("blocks", [])
        else:
            top = blocks_section
        variables = data.get("variables", [])
    else:
        raise BlockLoadError(
            f"expected an object or a list, got {type(data).__name__}", source=source
        )

    if not isinstance(top, list) or not isinstance(variables, list):
        raise BlockLoadError("'blocks' and 'variables' must be lists", source=source)

    var_names: dict[str, str] = {}
    ordered: list[str] = []
    for var in variables:
        if not isinstance(var, dict) or "name" not in var:
            raise BlockLoadError(f"malformed variable entry: {var!r}", source=source)
        name = str(var["name"])
        var_names[str(var.get("id", name))] = name
        ordered.append(name)

    blocks = tuple(_block(b, var_names, source) for b in top)
    logger.debug("loaded %d top-level block(s) from %s", len(blocks), source)
    return Workspace(blocks=blocks, variables=tuple(ordered))


def _block(data: Any, var_names: dict[str, str], source: str) -> Block:
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise BlockLoadError(f"block without a type: {data!r}", source=source)

    raw_fields = data.get("fields", {})
    raw_inputs = data.get("inputs", {})
    if not isinstance(raw_fields, dict) or not isinstance(raw_inputs, dict):
        raise BlockLoadError(
            f"'fields' and 'inputs' must be objects in block {data['type']!r}", source=source
        )

    fields = {name: _field_text(value, var_names) for name, value in raw_fields.items()}

    inputs: dict[str, Block | None] = {}
    for slot, conn in raw_inputs.items():
        inputs[slot] = _connected(conn, var_names, source)

    next_block = _connected(data.get("next"), var_names, source)

    return Block(
        type=data["type"],
        id=str(data.get("id", "")),
        fields=fields,
        inputs=inputs,
        next=next_block,
        comment=_comment(data, source),
        enabled=data.get("enabled", True) and not data.get("disabled", False),
    )


def _comment(data: dict[str, Any], source: str) -> str | None:
    """A plain ``comment`` string, or the text of a comment icon."""
    comment = data.get("comment")
    if comment is None:
        icons = data.get("icons")
        if not isinstance(icons, dict) or icons.get("comment") is None:
            return None
        icon = icons["comment"]
        if not isinstance(icon, dict):
            raise BlockLoadError(f"malformed comment icon: {icon!r}", source=source)
        comment = icon.get("text")
    if comment is not None and not isinstance(comment, str):
        raise BlockLoadError(f"block comment must be text: {comment!r}", source=source)
    return comment


def _connected(conn: Any, var_names: dict[str, str], source: str) -> Block | None:
    """A connection holds a block, a shadow block, both, or nothing."""
    if conn is None:
        return None
    if not isinstance(conn, dict):
        raise BlockLoadError(f"malformed connection: {conn!r}", source=source)
    child = conn.get("block") or conn.get("shadow")
    if child is None:
        return None
    return _block(child, var_names, source)


def _field_text(value: Any, var_names: dict[str, str]) -> str:
    if isinstance(value, dict):
        # Variable fields reference the workspace variable list by id.
        if "name" in value:
            return str(value["name"])
        var_id = str(value.get("id", ""))
        return var_names.get(var_id, var_id)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)
