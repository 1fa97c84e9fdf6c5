"""Token source that hides trivia from the parser and records it separately."""

from dicepy.diagnostics import Diagnostic
from dicepy.lexer import Lexer, Token, TokenKind, Trivia, trivia_kind_from_token_kind
from dicepy.text import TextRange, TextSize


class TokenSource:
    """Bridge between lexer and parser over a fully lexed token list.

    Trivia is attached as trailing trivia of the previous token, or as
    leading trivia of the first token.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._tokens: list[Token] = lexer.lex()
        self._trivia: list[Trivia] = []
        self._index = 0
        self._skip_trivia(trailing=False)

    @property
    def current(self) -> TokenKind:
        return self._tokens[self._index].kind

    @property
    def current_range(self) -> TextRange:
        return self._tokens[self._index].range

    @property
    def position(self) -> TextSize:
        return self.current_range.start

    def nth(self, n: int) -> TokenKind:
        """Kind of the n-th non-trivia token ahead (0 is the current one)."""
        index = self._index
        seen = 0
        while seen < n:
            index += 1
            if index >= len(self._tokens):
                return TokenKind.EOF
            if not self._tokens[index].kind.is_trivia:
                seen += 1
        return self._tokens[index].kind

    def bump(self) -> None:
        if self.current == TokenKind.EOF:
            return
        self._index += 1
        self._skip_trivia(trailing=True)

    def finish(self) -> tuple[list[Trivia], list[Diagnostic]]:
        return self._trivia, self._lexer.diagnostics

    def _skip_trivia(self, *, trailing: bool) -> None:
        while self._tokens[self._index].kind.is_trivia:
            token = self._tokens[self._index]
            self._trivia.append(Trivia(trivia_kind_from_token_kind(token.kind), token.range, trailing))
            self._index += 1
