"""
Mini-C Recursive Descent Parser
===============================

This module implements a recursive descent parser for Mini-C. It takes
the token stream from the lexer and builds an Abstract Syntax Tree.

Grammar (Simplified EBNF)
-------------------------
program         ::= function*
function        ::= type IDENTIFIER '(' params? ')' block
params          ::= 'void' | param (',' param)*
param           ::= type IDENTIFIER
type            ::= ('int' | 'char' | 'float' | 'void') '*'*

block           ::= '{' statement* '}'
statement       ::= declaration | if_stmt | while_stmt | return_stmt
                  | block | ';' | lvalue '=' expr ';' | expr ';'
declaration     ::= base_type declarator (',' declarator)* ';'
declarator      ::= '*'* IDENTIFIER
if_stmt         ::= 'if' '(' expr ')' statement ('else' statement)?
while_stmt      ::= 'while' '(' expr ')' statement
return_stmt     ::= 'return' expr? ';'
lvalue          ::= IDENTIFIER | '*' unary

Declarations may only appear directly inside a block, and have no
initializer: "int x; x = 1;" rather than "int x = 1;".

Expression Precedence (lowest to highest)
-----------------------------------------
1.  assignment     =          (statement level only)
2.  ternary        ?:         (right-associative)
3.  logical_or     ||
4.  logical_and    &&
5.  bitwise_or     |
6.  bitwise_xor    ^
7.  bitwise_and    &
8.  equality       == !=
9.  relational     < > <= >=
10. shift          << >>
11. additive       + -
12. multiplicative * / %
13. unary          - ! & * (type) sizeof(type)
14. postfix        call()
15. primary        IDENTIFIER, literals, '(' expr ')'

Error Recovery
--------------
A syntax error abandons the function it occurs in; the parser skips to
the end of that function by counting braces and carries on with the
next one. All errors found are raised together at the end of parse().

Each level of parentheses costs a couple of dozen Python frames, so
parse() raises the recursion limit while it runs. Nesting deep enough
to exhaust even that is reported as "expression nested too deeply".

Example Usage
-------------
>>> from c4py.minic.parser import parse_source
>>> program = parse_source('int main() { return 42; }', "test.c")
>>> [f.name for f in program.functions]
['main']
"""

import logging
from typing import Callable, Dict, Optional

from c4py.errors import SourceLocation
from c4py.minic.lexer import CLexer, CToken, CTokenType, TYPE_KEYWORDS
from c4py.minic.types import CType, BaseType, make_type
from c4py.minic.limits import PARSE_FRAME_HEADROOM, headroom, recursion_limit
from c4py.minic.ast import (
    ProgramNode,
    FunctionNode,
    Parameter,
    Statement,
    Block,
    VarDecl,
    Assign,
    ExpressionStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    Expression,
    BinaryOperator,
    UnaryOperator,
    BinaryExpression,
    UnaryExpression,
    ConditionalExpression,
    CallExpression,
    CastExpression,
    SizeofExpression,
    AddressOf,
    Dereference,
    Identifier,
    IntLiteral,
    FloatLiteral,
    CharLiteral,
    StringLiteral,
)
from c4py.minic.errors import (
    ParseError,
    UnexpectedTokenError,
    MissingTokenError,
    InvalidLValueError,
    RedeclarationError,
    ParseErrorCollector,
)


logger = logging.getLogger(__name__)

# Functions provided by the interpreter itself
BUILTIN_FUNCTIONS = frozenset({"print"})

# Map type keywords to base types
BASE_TYPES = {
    CTokenType.VOID: BaseType.VOID,
    CTokenType.CHAR: BaseType.CHAR,
    CTokenType.INT: BaseType.INT,
    CTokenType.FLOAT: BaseType.FLOAT,
}

# Name -> definition map used by the evaluator for every call
FunctionTable = Dict[str, FunctionNode]


class CParser:
    """
    Recursive descent parser for Mini-C.

    Parses a list of tokens into an Abstract Syntax Tree (AST). The
    parser recovers at function granularity to report multiple errors
    in one pass.

    Attributes:
        tokens: List of tokens to parse (must end with EOF)
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[CToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._pos = 0
        self._errors = ParseErrorCollector()

    def parse(self) -> ProgramNode:
        """
        Parse the token stream into an AST.

        Returns:
            ProgramNode containing all function definitions

        Raises:
            ParseError: The single error found, or a ParseErrorGroup
        """
        functions = []

        with recursion_limit(headroom(PARSE_FRAME_HEADROOM)):
            while not self._at_end():
                start = self._pos
                try:
                    functions.append(self._parse_function_guarded())
                except ParseError as e:
                    logger.debug(f"Parse error, skipping function: {e.message}")
                    self._errors.add(e)
                    if self._errors.should_stop():
                        break
                    self._synchronize(start)

        self._errors.raise_if_errors()

        logger.debug(f"Parsed {len(functions)} function(s)")
        return ProgramNode(
            location=SourceLocation(self.filename, 1, 1),
            functions=tuple(functions),
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == CTokenType.EOF

    def _peek(self, offset: int = 0) -> CToken:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _advance(self) -> CToken:
        """Consume and return the current token."""
        if not self._at_end():
            token = self.tokens[self._pos]
            self._pos += 1
            return token
        return self.tokens[-1]

    def _check(self, *types: CTokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: CTokenType) -> Optional[CToken]:
        """Consume current token if it matches one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: CTokenType, message: Optional[str] = None) -> CToken:
        """
        Expect and consume a specific token type.

        Args:
            token_type: The expected token type
            message: Description of what was expected

        Raises:
            MissingTokenError: If the expected token is not found
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        if message is None:
            message = token_type.name.lower()

        raise MissingTokenError(
            message,
            found=self._describe(current),
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _unexpected(self, token: CToken, expected: str) -> UnexpectedTokenError:
        """Build an UnexpectedTokenError for the given token."""
        return UnexpectedTokenError(
            self._describe(token),
            expected=expected,
            location=token.location,
            source_line=self._get_source_line(token.line),
        )

    def _syntax_error(
        self,
        message: str,
        location: SourceLocation,
        hint: Optional[str] = None,
    ) -> ParseError:
        return ParseError(
            message,
            location=location,
            hint=hint,
            source_line=self._get_source_line(location.line),
        )

    @staticmethod
    def _describe(token: CToken) -> str:
        """Text shown for a token in error messages."""
        if token.type == CTokenType.EOF:
            return "end of file"
        if token.type == CTokenType.STRING:
            return f'"{token.value}"'
        if token.type == CTokenType.CHAR_LITERAL:
            return f"'{chr(token.value)}'"
        return str(token.value)

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _synchronize(self, start: int) -> None:
        """
        Skip the rest of a broken function.

        Rewinds to where the function began and skips to its matching
        closing brace. A top-level ';' before any '{' also ends the
        skipped region.
        """
        self._pos = start
        depth = 0

        while not self._at_end():
            token = self._advance()
            if token.type == CTokenType.LBRACE:
                depth += 1
            elif token.type == CTokenType.RBRACE:
                depth -= 1
                if depth <= 0:
                    return
            elif token.type == CTokenType.SEMICOLON and depth == 0:
                return

    # =========================================================================
    # Types
    # =========================================================================

    def _is_type_keyword(self, offset: int = 0) -> bool:
        """Check if the token at offset starts a type."""
        return self._peek(offset).type in TYPE_KEYWORDS

    def _parse_base_type(self, expected: str = "type name") -> BaseType:
        """Parse one of int, char, float, void."""
        token = self._peek()
        if token.type not in BASE_TYPES:
            raise self._unexpected(token, expected)
        self._advance()
        return BASE_TYPES[token.type]

    def _parse_pointer_depth(self) -> int:
        depth = 0
        while self._match(CTokenType.STAR):
            depth += 1
        return depth

    def _parse_type(self, expected: str = "type name") -> CType:
        """Parse a full type: base type followed by any number of '*'."""
        base = self._parse_base_type(expected)
        return make_type(base, self._parse_pointer_depth())

    # =========================================================================
    # Functions
    # =========================================================================

    def _parse_function_guarded(self) -> FunctionNode:
        """Parse a function, reporting host stack exhaustion as a ParseError."""
        try:
            return self._parse_function()
        except RecursionError:
            location = self._peek().location
            logger.debug(f"Recursion limit reached at {location}")
            raise self._syntax_error(
                "expression nested too deeply",
                location,
                hint="split the expression using local variables",
            ) from None

    def _parse_function(self) -> FunctionNode:
        """Parse a function definition."""
        location = self._peek().location
        return_type = self._parse_type("function definition")

        name_token = self._expect(CTokenType.IDENTIFIER, "function name")
        name = name_token.value

        if self._check(CTokenType.SEMICOLON, CTokenType.COMMA, CTokenType.ASSIGN):
            raise self._syntax_error(
                f"global variable '{name}' is not supported",
                name_token.location,
                hint="declare variables inside a function",
            )

        logger.debug(f"Parsing function '{name}'")

        self._expect(CTokenType.LPAREN, "'('")
        parameters = self._parse_parameter_list()
        self._expect(CTokenType.RPAREN, "')'")

        body = self._parse_block()

        return FunctionNode(
            location=location,
            name=name,
            return_type=return_type,
            parameters=tuple(parameters),
            body=body,
        )

    def _parse_parameter_list(self) -> list[Parameter]:
        """Parse function parameter list; '()' and '(void)' are both empty."""
        parameters = []

        if self._check(CTokenType.RPAREN):
            return parameters

        if self._check(CTokenType.VOID) and self._peek(1).type == CTokenType.RPAREN:
            self._advance()
            return parameters

        while True:
            parameters.append(self._parse_parameter())
            if not self._match(CTokenType.COMMA):
                break

        return parameters

    def _parse_parameter(self) -> Parameter:
        """Parse a single function parameter."""
        location = self._peek().location
        param_type = self._parse_type("parameter type")

        name_token = self._expect(CTokenType.IDENTIFIER, "parameter name")

        if param_type.is_void:
            raise self._syntax_error(
                f"parameter '{name_token.value}' has type void",
                location,
            )

        return Parameter(
            location=location,
            name=name_token.value,
            param_type=param_type,
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_block(self) -> Block:
        """Parse a block statement { ... }."""
        location = self._peek().location
        self._expect(CTokenType.LBRACE, "'{'")

        statements = []
        while not self._check(CTokenType.RBRACE) and not self._at_end():
            if self._is_type_keyword():
                statements.extend(self._parse_declaration())
            else:
                statements.append(self._parse_statement())

        self._expect(CTokenType.RBRACE, "'}'")

        return Block(location=location, statements=tuple(statements))

    def _parse_declaration(self) -> list[VarDecl]:
        """
        Parse local variable declaration(s).

        Supports multi-variable declarations like:
            int a, b, c;
            char *p, c;
        """
        base = self._parse_base_type()

        declarations = [self._parse_declarator(base)]
        while self._match(CTokenType.COMMA):
            declarations.append(self._parse_declarator(base))

        if self._check(CTokenType.ASSIGN):
            raise self._syntax_error(
                "declarations cannot have an initializer",
                self._peek().location,
                hint=f"declare first, then assign: {declarations[-1].name} = ...;",
            )

        self._expect(CTokenType.SEMICOLON, "';'")
        return declarations

    def _parse_declarator(self, base: BaseType) -> VarDecl:
        location = self._peek().location
        var_type = make_type(base, self._parse_pointer_depth())
        name_token = self._expect(CTokenType.IDENTIFIER, "variable name")

        if var_type.is_void:
            raise self._syntax_error(
                f"variable '{name_token.value}' declared void",
                name_token.location,
                hint="only 'void *' variables are allowed",
            )

        return VarDecl(location=location, var_type=var_type, name=name_token.value)

    def _parse_statement(self) -> Statement:
        """Parse any statement other than a declaration."""
        token = self._peek()

        if token.type == CTokenType.IF:
            return self._parse_if_statement()
        if token.type == CTokenType.WHILE:
            return self._parse_while_statement()
        if token.type == CTokenType.RETURN:
            return self._parse_return_statement()
        if token.type == CTokenType.LBRACE:
            return self._parse_block()
        if token.type == CTokenType.SEMICOLON:
            self._advance()
            return ExpressionStatement(location=token.location)
        if token.type in TYPE_KEYWORDS:
            raise self._syntax_error(
                "a declaration is not allowed here",
                token.location,
                hint="put the declaration inside braces { ... }",
            )

        return self._parse_expression_statement()

    def _parse_if_statement(self) -> IfStatement:
        """Parse if statement."""
        location = self._peek().location
        self._expect(CTokenType.IF, "'if'")
        logger.debug("Parsing 'if' statement")
        self._expect(CTokenType.LPAREN, "'('")
        condition = self._parse_expression()
        self._expect(CTokenType.RPAREN, "')'")

        then_branch = self._parse_statement()

        else_branch = None
        if self._match(CTokenType.ELSE):
            else_branch = self._parse_statement()

        return IfStatement(
            location=location,
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
        )

    def _parse_while_statement(self) -> WhileStatement:
        """Parse while statement."""
        location = self._peek().location
        self._expect(CTokenType.WHILE, "'while'")
        logger.debug("Parsing 'while' loop")
        self._expect(CTokenType.LPAREN, "'('")
        condition = self._parse_expression()
        self._expect(CTokenType.RPAREN, "')'")

        body = self._parse_statement()

        return WhileStatement(location=location, condition=condition, body=body)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse return statement."""
        location = self._peek().location
        self._expect(CTokenType.RETURN, "'return'")

        value = None
        if not self._check(CTokenType.SEMICOLON):
            value = self._parse_expression()

        self._expect(CTokenType.SEMICOLON, "';'")

        return ReturnStatement(location=location, value=value)

    def _parse_expression_statement(self) -> Statement:
        """Parse an assignment or expression statement."""
        location = self._peek().location
        expression = self._parse_expression()

        if self._check(CTokenType.ASSIGN):
            assign_token = self._advance()
            if not isinstance(expression, (Identifier, Dereference)):
                raise InvalidLValueError(
                    location=assign_token.location,
                    source_line=self._get_source_line(assign_token.line),
                )
            value = self._parse_expression()
            if self._check(CTokenType.ASSIGN):
                raise self._unexpected(
                    self._peek(), "';' (assignments cannot be chained)"
                )
            self._expect(CTokenType.SEMICOLON, "';'")
            return Assign(location=location, target=expression, value=value)

        self._expect(CTokenType.SEMICOLON, "';'")
        return ExpressionStatement(location=location, expression=expression)

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse expression (assignment is handled at statement level)."""
        return self._parse_ternary()

    def _parse_ternary(self) -> Expression:
        """Parse ternary conditional expression (? :)."""
        expr = self._parse_logical_or()

        if self._match(CTokenType.QUESTION):
            then_expr = self._parse_expression()
            self._expect(CTokenType.COLON, "':'")
            else_expr = self._parse_ternary()
            return ConditionalExpression(
                location=expr.location,
                condition=expr,
                then_expr=then_expr,
                else_expr=else_expr,
            )

        return expr

    def _parse_logical_or(self) -> Expression:
        """Parse logical OR expression (||)."""
        return self._parse_binary(
            self._parse_logical_and,
            {CTokenType.OR: BinaryOperator.LOGICAL_OR},
        )

    def _parse_logical_and(self) -> Expression:
        """Parse logical AND expression (&&)."""
        return self._parse_binary(
            self._parse_bitwise_or,
            {CTokenType.AND: BinaryOperator.LOGICAL_AND},
        )

    def _parse_bitwise_or(self) -> Expression:
        """Parse bitwise OR expression (|)."""
        return self._parse_binary(
            self._parse_bitwise_xor,
            {CTokenType.PIPE: BinaryOperator.BITWISE_OR},
        )

    def _parse_bitwise_xor(self) -> Expression:
        """Parse bitwise XOR expression (^)."""
        return self._parse_binary(
            self._parse_bitwise_and,
            {CTokenType.CARET: BinaryOperator.BITWISE_XOR},
        )

    def _parse_bitwise_and(self) -> Expression:
        """Parse bitwise AND expression (&)."""
        return self._parse_binary(
            self._parse_equality,
            {CTokenType.AMPERSAND: BinaryOperator.BITWISE_AND},
        )

    def _parse_equality(self) -> Expression:
        """Parse equality expression (== !=)."""
        return self._parse_binary(
            self._parse_relational,
            {
                CTokenType.EQ: BinaryOperator.EQUAL,
                CTokenType.NE: BinaryOperator.NOT_EQUAL,
            },
        )

    def _parse_relational(self) -> Expression:
        """Parse relational expression (< > <= >=)."""
        return self._parse_binary(
            self._parse_shift,
            {
                CTokenType.LT: BinaryOperator.LESS,
                CTokenType.GT: BinaryOperator.GREATER,
                CTokenType.LE: BinaryOperator.LESS_EQ,
                CTokenType.GE: BinaryOperator.GREATER_EQ,
            },
        )

    def _parse_shift(self) -> Expression:
        """Parse shift expression (<< >>)."""
        return self._parse_binary(
            self._parse_additive,
            {
                CTokenType.LSHIFT: BinaryOperator.LEFT_SHIFT,
                CTokenType.RSHIFT: BinaryOperator.RIGHT_SHIFT,
            },
        )

    def _parse_additive(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(
            self._parse_multiplicative,
            {
                CTokenType.PLUS: BinaryOperator.ADD,
                CTokenType.MINUS: BinaryOperator.SUBTRACT,
            },
        )

    def _parse_multiplicative(self) -> Expression:
        """Parse multiplicative expression (* / %)."""
        return self._parse_binary(
            self._parse_unary,
            {
                CTokenType.STAR: BinaryOperator.MULTIPLY,
                CTokenType.SLASH: BinaryOperator.DIVIDE,
                CTokenType.PERCENT: BinaryOperator.MODULO,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[CTokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._peek().type in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                operator=operators[op_token.type],
                left=expr,
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse unary expression (- ! & * cast sizeof)."""
        token = self._peek()

        unary_ops = {
            CTokenType.MINUS: UnaryOperator.NEGATE,
            CTokenType.NOT: UnaryOperator.LOGICAL_NOT,
        }

        if token.type in unary_ops:
            self._advance()
            operand = self._parse_unary()
            return UnaryExpression(
                location=token.location,
                operator=unary_ops[token.type],
                operand=operand,
            )

        if token.type == CTokenType.STAR:
            self._advance()
            return Dereference(location=token.location, pointer=self._parse_unary())

        if token.type == CTokenType.AMPERSAND:
            self._advance()
            operand = self._parse_unary()
            if not isinstance(operand, Identifier):
                raise InvalidLValueError(
                    "cannot take the address of this expression",
                    location=operand.location,
                    source_line=self._get_source_line(operand.location.line),
                )
            return AddressOf(location=token.location, name=operand.name)

        if token.type == CTokenType.SIZEOF:
            return self._parse_sizeof()

        if token.type == CTokenType.LPAREN and self._is_type_keyword(1):
            return self._parse_cast()

        return self._parse_postfix()

    def _parse_sizeof(self) -> Expression:
        """Parse sizeof(type)."""
        location = self._peek().location
        self._expect(CTokenType.SIZEOF, "'sizeof'")
        self._expect(CTokenType.LPAREN, "'('")
        target_type = self._parse_type("type name in sizeof")
        self._expect(CTokenType.RPAREN, "')'")
        return SizeofExpression(location=location, target_type=target_type)

    def _parse_cast(self) -> Expression:
        """Parse cast expression (type)expr."""
        location = self._peek().location
        self._expect(CTokenType.LPAREN, "'('")
        target_type = self._parse_type()
        self._expect(CTokenType.RPAREN, "')'")

        operand = self._parse_unary()

        return CastExpression(
            location=location,
            target_type=target_type,
            operand=operand,
        )

    def _parse_postfix(self) -> Expression:
        """Parse postfix expression (function calls)."""
        expr = self._parse_primary()

        if self._check(CTokenType.LPAREN):
            if not isinstance(expr, Identifier):
                raise self._syntax_error("cannot call non-function", expr.location)
            self._advance()
            expr = self._parse_call(expr)

        return expr

    def _parse_call(self, callee: Identifier) -> CallExpression:
        """Parse function call arguments."""
        arguments = []
        if not self._check(CTokenType.RPAREN):
            while True:
                arguments.append(self._parse_expression())
                if not self._match(CTokenType.COMMA):
                    break

        self._expect(CTokenType.RPAREN, "')'")

        return CallExpression(
            location=callee.location,
            function_name=callee.name,
            arguments=tuple(arguments),
        )

    def _parse_primary(self) -> Expression:
        """Parse primary expression (literals, identifiers, parenthesized)."""
        token = self._peek()

        if token.type == CTokenType.NUMBER:
            self._advance()
            return IntLiteral(location=token.location, value=token.value)

        if token.type == CTokenType.FLOAT_NUMBER:
            self._advance()
            return FloatLiteral(location=token.location, value=token.value)

        if token.type == CTokenType.CHAR_LITERAL:
            self._advance()
            return CharLiteral(location=token.location, value=token.value)

        if token.type == CTokenType.STRING:
            self._advance()
            return StringLiteral(location=token.location, value=token.value)

        if token.type == CTokenType.IDENTIFIER:
            self._advance()
            return Identifier(location=token.location, name=token.value)

        if token.type == CTokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(CTokenType.RPAREN, "')'")
            return expr

        raise self._unexpected(token, "expression")


# =============================================================================
# Function Table
# =============================================================================

def link_functions(
    program: ProgramNode,
    source_lines: Optional[list[str]] = None,
) -> FunctionTable:
    """
    Build the name -> definition map for a parsed program.

    Args:
        program: The parsed program
        source_lines: Original source lines for error context

    Returns:
        FunctionTable keyed by function name

    Raises:
        RedeclarationError: If a function is defined twice, or a
            definition would shadow a builtin
    """
    source_lines = source_lines or []

    def line_of(location: SourceLocation) -> Optional[str]:
        if 0 < location.line <= len(source_lines):
            return source_lines[location.line - 1]
        return None

    table: FunctionTable = {}
    for function in program.functions:
        if function.name in BUILTIN_FUNCTIONS:
            raise RedeclarationError(
                function.name,
                location=function.location,
                source_line=line_of(function.location),
                hint=f"'{function.name}' is a builtin function",
            )
        if function.name in table:
            raise RedeclarationError(
                function.name,
                location=function.location,
                original_location=table[function.name].location,
                source_line=line_of(function.location),
            )
        table[function.name] = function

    logger.debug(f"Linked functions: {', '.join(table) or '(none)'}")
    return table


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse Mini-C source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The Mini-C source code
        filename: Source filename for error messages

    Returns:
        The root ProgramNode of the AST

    Raises:
        LexError: If the source cannot be tokenized
        ParseError: If parsing fails
    """
    tokens = list(CLexer(source, filename).tokenize())
    parser = CParser(tokens, filename, source.splitlines())
    return parser.parse()
