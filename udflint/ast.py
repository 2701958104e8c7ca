"""udflint/ast.py – statement tree consumed by the scope validator.

The Lua parser produces a much richer tree than validation needs.  The
parser adapter (:mod:`udflint.parser`) lowers it into the small, closed
set of statement kinds defined here; everything the validator does not
look at becomes an :class:`Other` leaf.

Design invariants
-----------------
* Every node is a frozen dataclass (immutable after construction).
* Blocks are tuples of statements, never lists.
* ``Statement`` is a closed union: the validator dispatches over exactly
  these classes and treats anything else as an internal error.
* Expressions are not modelled.  Assignment targets are either a bare
  :class:`Name` or an opaque :class:`IndexTarget`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

# ════════════════════════════════════════════════════════════════════════
# §1  Identifiers & targets
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Name:
    """An identifier at a declaration or parameter site.

    ``line`` is the 1-based source line when the parser reports one.
    """

    id: str
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self) -> str:  # noqa: D105
        return self.id


@dataclass(frozen=True, slots=True)
class IndexTarget:
    """A member/index assignment target such as ``t.x`` or ``t[k]``."""

    text: str = ""
    line: Optional[int] = field(default=None, compare=False)


Target = Union[Name, IndexTarget]


# ════════════════════════════════════════════════════════════════════════
# §2  Statements
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    """``function f(a, b) ... end``, ``local function f(...)`` or a method.

    ``name`` is informational only; it is not validated.
    """

    name: str
    params: Tuple[Name, ...]
    body: Block
    local: bool = False


@dataclass(frozen=True, slots=True)
class LocalDeclaration:
    """``local a, b = ...``"""

    targets: Tuple[Name, ...]


@dataclass(frozen=True, slots=True)
class Assignment:
    """``a, t.b = ...``"""

    targets: Tuple[Target, ...]

    @property
    def names(self) -> Tuple[Name, ...]:
        """The bare-identifier targets, in order."""
        return tuple(t for t in self.targets if isinstance(t, Name))


@dataclass(frozen=True, slots=True)
class If:
    """``if ... then body elseif ... then b1 ... else orelse end``"""

    body: Block
    elseifs: Tuple[Block, ...] = ()
    orelse: Optional[Block] = None

    def blocks(self) -> Tuple[Block, ...]:
        """Every owned block in source order."""
        tail: Tuple[Block, ...] = (self.orelse,) if self.orelse is not None else ()
        return (self.body,) + self.elseifs + tail


@dataclass(frozen=True, slots=True)
class While:
    body: Block


@dataclass(frozen=True, slots=True)
class NumericFor:
    body: Block


@dataclass(frozen=True, slots=True)
class GenericFor:
    body: Block


@dataclass(frozen=True, slots=True)
class Repeat:
    body: Block


@dataclass(frozen=True, slots=True)
class Other:
    """Any statement that cannot declare a checked name.

    ``kind`` records the parser's node name for debugging and dumps.
    """

    kind: str = "other"


Statement = Union[
    FunctionDeclaration,
    LocalDeclaration,
    Assignment,
    If,
    While,
    NumericFor,
    GenericFor,
    Repeat,
    Other,
]

Block = Tuple[Statement, ...]

#: Statement kinds that own exactly one nested block.
LOOP_STATEMENTS = (While, NumericFor, GenericFor, Repeat)


@dataclass(frozen=True, slots=True)
class SyntaxTree:
    """The root block of a script."""

    body: Block = ()

    def __len__(self) -> int:
        return len(self.body)
