"""Generation errors and their Rust-style colored rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points at the block (and optionally the field) that caused a problem."""

    block_id: str
    message: str
    block_type: str = ""


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        # Header: error[E100]: message
        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            where = f"block {label.block_id or '<anonymous>'}"
            if label.block_type:
                where += f" ({label.block_type})"
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {where}")
            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class SkoolbotError(Exception):
    """Base class for errors that carry a renderable diagnostic."""

    code = "E000"

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(Severity.ERROR, self.code, str(self))


class UnrecognizedTag(SkoolbotError):
    """A block type or field value has no entry in its lookup table.

    Raised immediately; the generation pass is abandoned.
    """

    code = "E100"

    def __init__(
        self,
        field: str,
        value: str | None,
        *,
        block_id: str = "",
        block_type: str = "",
    ) -> None:
        self.field = field
        self.value = value
        self.block_id = block_id
        self.block_type = block_type
        if field == "type":
            message = f"unknown block type: {value!r}"
        else:
            message = f"unknown {field} value: {value!r}"
        super().__init__(message)

    def diagnostic(self) -> Diagnostic:
        diag = super().diagnostic()
        diag.labels.append(
            DiagnosticLabel(self.block_id, f"{self.field} = {self.value!r}", self.block_type)
        )
        return diag


class SlotError(SkoolbotError):
    """A statement block is plugged into a slot that expects a value."""

    code = "E101"

    def __init__(self, slot: str, child_type: str, *, block_id: str = "") -> None:
        self.slot = slot
        self.child_type = child_type
        self.block_id = block_id
        super().__init__(f"slot {slot!r} expects a value, got statement block {child_type!r}")

    def diagnostic(self) -> Diagnostic:
        diag = super().diagnostic()
        diag.labels.append(DiagnosticLabel(self.block_id, f"input {self.slot}"))
        return diag


class BlockLoadError(SkoolbotError):
    """Blocks file is not valid block JSON."""

    code = "E200"

    def __init__(self, message: str, *, source: str = "") -> None:
        self.source = source
        super().__init__(message)

    def diagnostic(self) -> Diagnostic:
        diag = super().diagnostic()
        if self.source:
            diag.notes.append(f"while reading {self.source}")
        return diag
