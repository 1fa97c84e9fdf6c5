"""Parse and evaluation result carriers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from dicepy.cst import from_green
from dicepy.diagnostics import first_error, has_errors
from dicepy.errors import DiceSyntaxError
from dicepy.parser.tree_sink import ParsedGreenTree

if TYPE_CHECKING:
    from dicepy.ast import DiceAst
    from dicepy.cst import GreenNode, SyntaxNode
    from dicepy.diagnostics import Diagnostic

RollValue: TypeAlias = int | float | str


@dataclass(slots=True)
class DiceParseResult:
    """Parse carrier with lazily built syntax tree and AST."""

    source_text: str
    parsed: ParsedGreenTree
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)
    _ast_root: DiceAst | None = field(default=None, init=False, repr=False)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def green_root(self) -> GreenNode:
        return self.parsed.root

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root

    def ast_root(self) -> DiceAst:
        """Lower to the AST; raises `DiceSyntaxError` if parsing reported an error."""
        if self._ast_root is None:
            error = first_error(self.parsed.diagnostics)
            if error is not None:
                raise DiceSyntaxError(error.render(), diagnostics=self.parsed.diagnostics)

            from dicepy.ast.lower import lower_syntax_tree

            self._ast_root = lower_syntax_tree(self.syntax_root())
        return self._ast_root


@dataclass(slots=True)
class EvaluationResult:
    """Outcome of evaluating one AST node.

    `details` is keyed by evaluator (e.g. `details["exhaustive"]["total_successes"]`).
    """

    total: int | float = 0
    rolls: list[RollValue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)
