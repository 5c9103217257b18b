"""
Parser for Rill

Structure:
- Lexer: token list from source (always EOF-terminated)
- Parser: recursive descent for statements, shunting-yard for expressions
- AST: rill.tree.Node, one BLOCK root per program
"""

from typing import List, Optional, Union

from .token_types import TT, Tok
from .tree import Node, block, leaf
from .types import RillError

# ============================================================================
# Errors
# ============================================================================

class ParseError(RillError):
    """Parse error with the offending token"""
    stage = 'parse'

    def __init__(self, message: str, token: Optional[Tok] = None):
        super().__init__(message, token.offset if token is not None else None)
        self.token = token


class ParserInvariantError(RuntimeError):
    """Raised when the parser's own bookkeeping breaks; never bad input."""


# ============================================================================
# Parser
# ============================================================================

# Shunting-yard precedence, all left associative.
PRECEDENCE = {
    '==': 1,
    '!=': 1,
    '&&': 1,
    '||': 1,
    '+': 2,
    '-': 2,
    '*': 3,
    '/': 3,
}

_OPERAND_START = (TT.NUMERIC, TT.STRING, TT.IDENTIFIER, TT.LPAREN)

PostfixItem = Union[Node, Tok]


class Parser:
    """
    Parser for Rill.

    Statements:
        if (expr) { ... } [else { ... }]
        while (expr) { ... }
        fn name(a, b) { ... }
        { ... }
        name = expr
        expr

    Expression precedence (lowest to highest):
    1. == != && ||
    2. + -
    3. * /
    Operands are literals, identifiers, calls and parenthesised groups.
    """

    def __init__(self, tokens: List[Tok]):
        if not tokens or tokens[-1].kind != TT.EOF:
            raise ParserInvariantError("token stream must end with an EOF token")

        self.tokens = tokens
        self.pos = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def peek(self) -> Tok:
        return self.current

    def peek_next(self) -> Tok:
        """Token after the current one; EOF sticks at the end"""
        idx = min(self.pos + 1, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Tok:
        """Consume current token and move to next (never past EOF)"""
        prev = self.current
        if prev.kind != TT.EOF:
            self.pos += 1
        return prev

    def check(self, *kinds: TT) -> bool:
        return self.current.kind in kinds

    def consume(self, kind: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected kind or raise"""
        if not self.check(kind):
            tok = self.current
            msg = message or f"Expected {kind.name}, got {tok.kind.name}"
            raise ParseError(msg, tok)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Node:
        """Parse entire program into one scope-creating BLOCK"""
        stmts: List[Node] = []

        try:
            while not self.check(TT.EOF):
                stmts.append(self.parse_statement())
        except RecursionError:
            raise ParseError("Maximum nesting depth exceeded", self.current) from None

        return block(stmts, creates_scope=True, offset=0)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Node:
        tok = self.current

        match tok.kind:
            case TT.IF:
                return self.parse_if()
            case TT.WHILE:
                return self.parse_while()
            case TT.FN:
                return self.parse_fn_def()
            case TT.FOR:
                raise ParseError("for loops are not yet implemented", tok)
            case TT.LBRACE:
                return self.parse_block(creates_scope=True)
            case TT.IDENTIFIER if self.peek_next().kind == TT.ASSIGN:
                return self.parse_assign()
            case _:
                return self.parse_expression()

    def parse_if(self) -> Node:
        """if (cond) { then } [else { otherwise }]"""
        if_tok = self.consume(TT.IF)
        self.consume(TT.LPAREN, "Expected '(' after 'if'")
        cond = self.parse_expression()
        self.consume(TT.RPAREN, "Expected ')' after if condition")
        then_body = self.parse_block(creates_scope=True)

        children = [cond, then_body]

        if self.check(TT.ELSE):
            self.advance()
            children.append(self.parse_block(creates_scope=True))

        return Node(if_tok, children)

    def parse_while(self) -> Node:
        """while (cond) { body }"""
        while_tok = self.consume(TT.WHILE)
        self.consume(TT.LPAREN, "Expected '(' after 'while'")
        cond = self.parse_expression()
        self.consume(TT.RPAREN, "Expected ')' after while condition")
        body = self.parse_block(creates_scope=True)
        return Node(while_tok, [cond, body])

    def parse_fn_def(self) -> Node:
        """
        fn name(params) { body }

        The body block does not open its own scope: the call opens one and
        binds the parameters into it before running the body.
        """
        fn_tok = self.consume(TT.FN)
        name = self.consume(TT.IDENTIFIER, "Expected function name after 'fn'")
        self.consume(TT.LPAREN, "Expected '(' after function name")

        params: List[Node] = []
        if not self.check(TT.RPAREN):
            params.append(leaf(self.consume(TT.IDENTIFIER, "Expected parameter name")))
            while self.check(TT.COMMA):
                self.advance()
                params.append(leaf(self.consume(TT.IDENTIFIER, "Expected parameter name")))

        self.consume(TT.RPAREN, "Expected ')' after parameters")
        body = self.parse_block(creates_scope=False)

        return Node(fn_tok, [leaf(name), *params, body])

    def parse_assign(self) -> Node:
        """name = expr"""
        name = self.consume(TT.IDENTIFIER)
        assign_tok = self.consume(TT.ASSIGN)
        value = self.parse_expression()
        return Node(assign_tok, [leaf(name), value])

    def parse_block(self, creates_scope: bool) -> Node:
        """{ stmt* }"""
        lbrace = self.consume(TT.LBRACE, f"Expected '{{', got {self.current.kind.name}")
        stmts: List[Node] = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("Expected '}' before end of input", self.current)
            stmts.append(self.parse_statement())

        self.consume(TT.RBRACE)
        return block(stmts, creates_scope=creates_scope, offset=lbrace.offset)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> Node:
        """
        Shunting-yard over the run of operands/operators at the cursor.

        The run ends at the first token that can neither continue it nor
        start an operand, or at an operand that directly follows another
        operand (the start of the next statement).
        """
        start = self.current
        output: List[PostfixItem] = []
        operators: List[Tok] = []
        expect_operand = True

        while True:
            tok = self.current

            if tok.kind in _OPERAND_START:
                if not expect_operand:
                    break
                output.append(self.parse_operand())
                expect_operand = False
                continue

            if tok.kind == TT.BINARYOP:
                if expect_operand:
                    raise ParseError(f"Unexpected operator '{tok.text}'", tok)

                prec = PRECEDENCE[tok.text]
                while operators and PRECEDENCE[operators[-1].text] >= prec:
                    output.append(operators.pop())

                operators.append(self.advance())
                expect_operand = True
                continue

            break

        if operators and expect_operand:
            raise ParseError(f"Expected operand after '{operators[-1].text}'", self.current)

        while operators:
            output.append(operators.pop())

        return self.fold_postfix(output, start)

    def fold_postfix(self, postfix: List[PostfixItem], start: Tok) -> Node:
        stack: List[Node] = []

        for item in postfix:
            if isinstance(item, Node):
                stack.append(item)
                continue

            if len(stack) < 2:
                raise ParserInvariantError(
                    f"postfix fold underflowed at operator '{item.text}' (offset {item.offset})"
                )
            # right operand sits on top
            right = stack.pop()
            left = stack.pop()
            stack.append(Node(item, [left, right]))

        if not stack:
            raise ParseError(f"Expected expression, got {start.kind.name}", start)

        if len(stack) > 1:
            raise ParseError("Expression failed to resolve to a single expression", start)

        return stack[0]

    def parse_operand(self) -> Node:
        tok = self.current

        if tok.kind == TT.IDENTIFIER and self.peek_next().kind == TT.LPAREN:
            return self.parse_call()

        if tok.kind == TT.LPAREN:
            self.advance()
            inner = self.parse_expression()
            self.consume(TT.RPAREN, "Expected ')' to close group")
            return inner

        return leaf(self.advance())

    def parse_call(self) -> Node:
        """name(arg, ...) -> CALL node with the arguments as children"""
        name = self.consume(TT.IDENTIFIER)
        self.consume(TT.LPAREN)

        args: List[Node] = []
        if not self.check(TT.RPAREN):
            args.append(self.parse_expression())
            while self.check(TT.COMMA):
                self.advance()
                args.append(self.parse_expression())

        self.consume(TT.RPAREN, "Expected ')' after call arguments")
        return Node(Tok(TT.CALL, name.text, name.offset), args)


# ============================================================================
# Convenience
# ============================================================================

def parse(tokens: List[Tok]) -> Node:
    return Parser(tokens).parse()


def parse_source(source: str) -> Node:
    """Tokenize and parse Rill source into its root BLOCK node."""
    from .lexer import tokenize

    return parse(tokenize(source))


if __name__ == '__main__':
    import sys

    try:
        print(parse_source(sys.stdin.read()).pretty())
    except RillError as e:
        print(f"{e.stage} error: {e}", file=sys.stderr)
        sys.exit(1)
