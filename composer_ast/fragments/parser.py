"""
Fragment parser (Lark) producing raw JSON nodes.

Supported language subset:
- Statements: if / else if / else, while, assignment, variable definition
  (including `create` connector initializers), return, expression statement
- Expressions: || && == != < <= > >= + - * / %, unary ! and -, literals
  (int, float, string, true/false), variable references, function calls,
  parenthesized expressions
- `//` line comments

Whitespace and comments are ignored by the grammar but captured from the
source: every raw node carries a `ws` mapping with the text that follows each
of its own tokens, so the raw tree renders back to the exact input.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from lark import Lark, Token, Transformer, Tree, UnexpectedInput

from ..core.exceptions import FragmentParseError


_GRAMMAR = r"""
compilation_unit: statement*
statement_fragment: statement
expression_fragment: expr

?statement: if_else_statement
          | while_statement
          | assignment_statement
          | variable_definition_statement
          | return_statement
          | expression_statement

if_else_statement: if_clause else_if_clause* else_clause?
if_clause: "if" "(" expr ")" _block
else_if_clause: "else" "if" "(" expr ")" _block
else_clause: "else" _block
while_statement: "while" "(" expr ")" _block
_block: "{" statement* "}"

assignment_statement: variable_reference "=" expr ";"
variable_definition_statement: variable_declaration "=" (expr | connector_init_expr) ";"
variable_declaration: NAME NAME
return_statement: "return" (expr ("," expr)*)? ";"
expression_statement: expr ";"

?expr: or_expr
?or_expr: and_expr
        | or_expr OR and_expr -> binary_expr
?and_expr: equality_expr
         | and_expr AND equality_expr -> binary_expr
?equality_expr: relational_expr
              | equality_expr EQ_OP relational_expr -> binary_expr
?relational_expr: additive_expr
                | relational_expr REL_OP additive_expr -> binary_expr
?additive_expr: multiplicative_expr
              | additive_expr (PLUS | MINUS) multiplicative_expr -> binary_expr
?multiplicative_expr: unary
                    | multiplicative_expr MUL_OP unary -> binary_expr
?unary: primary
      | (BANG | MINUS) unary -> unary_expr
?primary: literal
        | variable_reference
        | function_invocation
        | bracketed_expr

literal: NUMBER | STRING | TRUE | FALSE
variable_reference: NAME
function_invocation: NAME "(" _arguments? ")"
bracketed_expr: "(" expr ")"
connector_init_expr: "create" NAME "(" _arguments? ")"
_arguments: expr ("," expr)*

OR: "||"
AND: "&&"
EQ_OP: "==" | "!="
REL_OP: "<=" | ">=" | "<" | ">"
PLUS: "+"
MINUS: "-"
MUL_OP: "*" | "/" | "%"
BANG: "!"
TRUE: "true"
FALSE: "false"

NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
NUMBER: /[0-9]+(\.[0-9]+)?/
COMMENT: /\/\/[^\n]*/

%import common.ESCAPED_STRING -> STRING
%import common.WS
%ignore WS
%ignore COMMENT
"""

START_COMPILATION_UNIT = "compilation_unit"
START_STATEMENT = "statement_fragment"
START_EXPRESSION = "expression_fragment"

_parser = Lark(
    _GRAMMAR,
    parser="lalr",
    start=[START_COMPILATION_UNIT, START_STATEMENT, START_EXPRESSION],
    keep_all_tokens=True,
)


class _ToRawJson(Transformer):
    """Turn the Lark tree into raw JSON nodes with captured whitespace."""

    def __init__(self, source: str, tree: Tree) -> None:
        super().__init__()
        self._source = source
        tokens = sorted(
            tree.scan_values(lambda v: isinstance(v, Token)), key=lambda t: t.start_pos
        )
        self._leading = source[: tokens[0].start_pos] if tokens else source
        self._next_start: Dict[int, int] = {}
        for current, following in zip(tokens, tokens[1:]):
            self._next_start[current.start_pos] = following.start_pos

    def _trailing(self, token: Token) -> str:
        end = self._next_start.get(token.start_pos, len(self._source))
        return self._source[token.end_pos : end]

    def _ws(self, tokens: Sequence[Token]) -> Dict[str, str]:
        return {str(i): self._trailing(tok) for i, tok in enumerate(tokens)}

    def _ws_with_separators(
        self, items: List[Any], fixed: int, separator_base: int
    ) -> Dict[str, str]:
        """Regions for nodes whose closing tokens follow a comma-separated list."""
        tokens = _tokens(items)
        commas = [t for t in tokens if t == ","]
        own = [t for t in tokens if t != ","]
        ws = {str(i): self._trailing(tok) for i, tok in enumerate(own[:fixed])}
        for i, comma in enumerate(commas):
            ws[str(separator_base + i)] = self._trailing(comma)
        return ws

    def compilation_unit(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "CompilationUnit",
            "children": _nodes(items),
            "ws": {"0": self._leading},
        }

    def statement_fragment(self, items: List[Any]) -> Dict[str, Any]:
        return items[0]

    def expression_fragment(self, items: List[Any]) -> Dict[str, Any]:
        return items[0]

    def if_else_statement(self, items: List[Any]) -> Dict[str, Any]:
        return {"type": "IfElseStatement", "children": _nodes(items)}

    def if_clause(self, items: List[Any]) -> Dict[str, Any]:
        return self._conditional("IfStatement", items)

    def else_if_clause(self, items: List[Any]) -> Dict[str, Any]:
        return self._conditional("ElseIfStatement", items)

    def while_statement(self, items: List[Any]) -> Dict[str, Any]:
        return self._conditional("WhileStatement", items)

    def _conditional(self, node_type: str, items: List[Any]) -> Dict[str, Any]:
        nodes = _nodes(items)
        return {
            "type": node_type,
            "condition": nodes[0],
            "children": nodes[1:],
            "ws": self._ws(_tokens(items)),
        }

    def else_clause(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "ElseStatement",
            "children": _nodes(items),
            "ws": self._ws(_tokens(items)),
        }

    def assignment_statement(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "AssignmentStatement",
            "children": _nodes(items),
            "ws": self._ws(_tokens(items)),
        }

    def variable_definition_statement(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "variable_definition_statement",
            "children": _nodes(items),
            "ws": self._ws(_tokens(items)),
        }

    def variable_declaration(self, items: List[Any]) -> Dict[str, Any]:
        type_name, variable_name = _tokens(items)
        return {
            "type": "VariableDeclaration",
            "type_name": str(type_name),
            "variable_name": str(variable_name),
            "ws": self._ws([type_name, variable_name]),
        }

    def return_statement(self, items: List[Any]) -> Dict[str, Any]:
        # Fixed regions: 0 after 'return', 1 after ';'; commas from 2.
        return {
            "type": "ReturnStatement",
            "children": _nodes(items),
            "ws": self._ws_with_separators(items, fixed=2, separator_base=2),
        }

    def expression_statement(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "ExpressionStatement",
            "children": _nodes(items),
            "ws": self._ws(_tokens(items)),
        }

    def binary_expr(self, items: List[Any]) -> Dict[str, Any]:
        (operator,) = _tokens(items)
        return {
            "type": "BinaryExpr",
            "operator": str(operator),
            "children": _nodes(items),
            "ws": self._ws([operator]),
        }

    def unary_expr(self, items: List[Any]) -> Dict[str, Any]:
        (operator,) = _tokens(items)
        return {
            "type": "UnaryExpr",
            "operator": str(operator),
            "children": _nodes(items),
            "ws": self._ws([operator]),
        }

    def literal(self, items: List[Any]) -> Dict[str, Any]:
        (token,) = _tokens(items)
        if token.type == "STRING":
            literal_type = "string"
        elif token.type in ("TRUE", "FALSE"):
            literal_type = "boolean"
        elif "." in token:
            literal_type = "float"
        else:
            literal_type = "int"
        return {
            "type": "BasicLiteralExpr",
            "literal_type": literal_type,
            "value": str(token),
            "ws": self._ws([token]),
        }

    def variable_reference(self, items: List[Any]) -> Dict[str, Any]:
        (name,) = _tokens(items)
        return {
            "type": "VariableReferenceExpr",
            "variable_name": str(name),
            "ws": self._ws([name]),
        }

    def function_invocation(self, items: List[Any]) -> Dict[str, Any]:
        # Fixed regions: 0 after name, 1 after '(', 2 after ')'; commas from 3.
        return {
            "type": "FunctionInvocationExpr",
            "function_name": str(_tokens(items)[0]),
            "children": _nodes(items),
            "ws": self._ws_with_separators(items, fixed=3, separator_base=3),
        }

    def bracketed_expr(self, items: List[Any]) -> Dict[str, Any]:
        return {
            "type": "BracketedExpr",
            "children": _nodes(items),
            "ws": self._ws(_tokens(items)),
        }

    def connector_init_expr(self, items: List[Any]) -> Dict[str, Any]:
        # Fixed regions: 0 after 'create', 1 after name, 2 after '(', 3 after ')';
        # commas from 4.
        return {
            "type": "connector_init_expr",
            "connector_name": str(_tokens(items)[1]),
            "children": _nodes(items),
            "ws": self._ws_with_separators(items, fixed=4, separator_base=4),
        }


def _tokens(items: List[Any]) -> List[Token]:
    return [it for it in items if isinstance(it, Token)]


def _nodes(items: List[Any]) -> List[Dict[str, Any]]:
    return [it for it in items if isinstance(it, dict)]


def parse_text(text: str, start: str) -> Dict[str, Any]:
    """
    Parse text from a grammar start symbol into a raw JSON node.

    Args:
        text: Source text
        start: One of START_COMPILATION_UNIT, START_STATEMENT, START_EXPRESSION

    Returns:
        Raw JSON node

    Raises:
        FragmentParseError
    """
    try:
        tree = _parser.parse(text, start=start)
    except UnexpectedInput as e:
        raise FragmentParseError(
            f"Invalid {start.replace('_', ' ')}: {e}",
            fragment=text,
            line=getattr(e, "line", None),
            column=getattr(e, "column", None),
        ) from e
    return _ToRawJson(text, tree).transform(tree)
