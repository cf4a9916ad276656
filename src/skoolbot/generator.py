"""Drive one generation pass over a block tree and produce Skoolbot source."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from skoolbot.blocks import Block, Workspace
from skoolbot.code import EMPTY_STATEMENT, Code, Expression, Order, Statement
from skoolbot.config import SkoolbotConfig
from skoolbot.errors import SlotError, UnrecognizedTag
from skoolbot.helper_registry import HelperRegistry
from skoolbot.math_blocks import MATH_EMITTERS
from skoolbot.names import NameDB, NameKind

logger = logging.getLogger(__name__)

Emitter = Callable[[Block, "Generator"], Code]

_TRAILING_SPACE = re.compile(r"[ \t]+\n")


class Generator:
    """Emit Skoolbot from blocks.

    One instance runs one pass at a time: ``init`` clears the helper
    registry and the name database, so separate threads need separate
    generators.
    """

    def __init__(self, config: SkoolbotConfig | None = None) -> None:
        self.config = config or SkoolbotConfig()
        self.names = NameDB(self.config.names.reserved)
        self.helpers = HelperRegistry(self.names)
        self._emitters: dict[str, Emitter] = {
            kind.value: emitter for kind, emitter in MATH_EMITTERS.items()
        }

    # ── Emitter table ──────────────────────────────────────────

    def register(self, block_type: str, emitter: Emitter) -> None:
        """Add (or replace) the emitter for *block_type*."""
        self._emitters[block_type] = emitter

    def handles(self, block_type: str) -> bool:
        return block_type in self._emitters

    # ── Pass lifecycle ─────────────────────────────────────────

    def init(self, workspace: Workspace | None = None) -> None:
        """Start a fresh pass, reserving every user variable name first."""
        self.names.reset()
        self.helpers.reset()
        if workspace is not None:
            for name in workspace.variable_names():
                self.names.get_name(name, NameKind.VARIABLE)

    def finish(self, code: str) -> str:
        """Prepend the helper definitions requested during the pass."""
        definitions = list(self.helpers.definitions())
        logger.debug("pass finished with %d helper(s)", len(definitions))
        if not definitions:
            return code
        return "\n\n".join(definitions) + "\n\n\n" + code

    def workspace_to_code(self, workspace: Workspace) -> str:
        """Generate the complete program for *workspace*."""
        logger.debug("pass started: %d top-level block(s)", len(workspace.blocks))
        self.init(workspace)
        stacks = [self.statement_to_code(block) for block in workspace.blocks]
        code = self.finish("\n".join(s for s in stacks if s))
        code = re.sub(r"^\s+\n", "", code)
        code = re.sub(r"\n\s+$", "\n", code)
        return _TRAILING_SPACE.sub("\n", code)

    # ── Services for emitters ──────────────────────────────────

    def provide_function(self, logical_name: str, lines: Sequence[str]) -> str:
        return self.helpers.provide(logical_name, lines)

    def variable_name(self, name: str) -> str:
        return self.names.get_name(name, NameKind.VARIABLE)

    # ── Block dispatch ─────────────────────────────────────────

    def block_to_code(self, block: Block) -> Code:
        """Emit a single block (not its ``next`` chain)."""
        if not block.enabled:
            return EMPTY_STATEMENT
        emitter = self._emitters.get(block.type)
        if emitter is None:
            raise UnrecognizedTag("type", block.type, block_id=block.id, block_type=block.type)
        return emitter(block, self)

    def value_to_code(self, block: Block, slot: str, order: Order) -> str | None:
        """Emit the block in *slot*, parenthesized if it binds looser than *order*.

        Returns None when the slot is empty or holds a disabled block.
        """
        child = block.input_block(slot)
        if child is None or not child.enabled:
            return None
        code = self.block_to_code(child)
        if isinstance(code, Statement):
            raise SlotError(slot, child.type, block_id=block.id)
        return code.wrapped(order)

    def expression_to_code(self, block: Block) -> Expression:
        code = self.block_to_code(block)
        if isinstance(code, Statement):
            raise SlotError("<top>", block.type, block_id=block.id)
        return code

    def statement_to_code(self, block: Block | None) -> str:
        """Emit *block* and every block chained below it."""
        parts: list[str] = []
        current = block
        while current is not None:
            if current.enabled:
                code = self.block_to_code(current)
                if isinstance(code, Expression):
                    text = self.scrub_naked_value(code.text)
                else:
                    text = code.text
                parts.append(self._comment_prefix(current) + text)
            current = current.next
        return "".join(parts)

    def scrub_naked_value(self, line: str) -> str:
        """Turn an expression left on its own into a legal statement."""
        return f"{self.config.generator.naked_value_prefix}{line}\n"

    def _comment_prefix(self, block: Block) -> str:
        if not self.config.generator.comments or not block.comment:
            return ""
        return "".join(f"-- {line}".rstrip() + "\n" for line in block.comment.splitlines())
