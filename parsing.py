"""
Scheme reader for the Y-combinator evaluator
Parses source text into a CST of datums with source spans
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from pyparsing import (
    ZeroOrMore, Forward, ParseException, Regex, Suppress, Literal,
    StringEnd, ParserElement, rest_of_line, lineno, col
)

from error_handling import SchemeParseError, parse_error_from_exception

# Enable packrat parsing for performance
ParserElement.enable_packrat()


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for preserving CST"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class CSTNode:
    """Concrete Syntax Tree node: one datum of the source"""
    type: str
    value: Any
    children: List['CSTNode'] = field(default_factory=list)
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.type == "LIST":
            return "(" + " ".join(str(child) for child in self.children) + ")"
        if self.type == "QUOTE":
            return "'" + str(self.children[0])
        if self.type == "BOOLEAN":
            return "#t" if self.value else "#f"
        return str(self.value)


def make_span(filename: str, text: str, start: int, end: int) -> SourceSpan:
    """Build a span from string offsets"""
    return SourceSpan(
        filename,
        lineno(start, text), col(start, text),
        lineno(end, text), col(end, text),
        text[start:end]
    )


class SchemeGrammar:
    """Scheme datum grammar definition using pyparsing"""

    def __init__(self, filename: str = "<input>", debug: bool = False):
        self.filename = filename
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the datum grammar: atoms, lists and quote"""

        datum = Forward()

        def node_action(node_type: str, convert):
            def action(s, loc, tokens):
                end = loc + len(tokens[0])
                return CSTNode(node_type, convert(tokens[0]), [],
                               make_span(self.filename, s, loc, end))
            return action

        # Atoms
        boolean = Regex(r"#t(?:rue)?(?![^\s()\[\]';])|#f(?:alse)?(?![^\s()\[\]';])")
        boolean.set_parse_action(node_action("BOOLEAN", lambda t: t.startswith("#t")))
        boolean.set_name("boolean")

        number = Regex(r"[+-]?\d+(?![^\s()\[\]';])")
        number.set_parse_action(node_action("NUMBER", int))
        number.set_name("number")

        identifier = Regex(r"[^\s()\[\]'\";#][^\s()\[\]'\";]*")
        identifier.set_parse_action(node_action("SYMBOL", str))
        identifier.set_name("identifier")

        atom = boolean | number | identifier

        # Compound data
        def make_list(s, loc, tokens):
            children = [t for t in tokens if isinstance(t, CSTNode)]
            end = tokens[-1] if tokens else loc
            return CSTNode("LIST", None, children,
                           make_span(self.filename, s, loc, end))

        def closer_loc(s, loc, tokens):
            return loc + 1

        open_paren = Suppress("(")
        close_paren = Literal(")").set_parse_action(closer_loc)
        open_bracket = Suppress("[")
        close_bracket = Literal("]").set_parse_action(closer_loc)

        paren_list = (open_paren + ZeroOrMore(datum) + close_paren).set_parse_action(make_list)
        bracket_list = (open_bracket + ZeroOrMore(datum) + close_bracket).set_parse_action(make_list)
        list_datum = paren_list | bracket_list
        list_datum.set_name("list")

        def make_quote(s, loc, tokens):
            quoted = tokens[0]
            end = loc + 1 + len(quoted.span.text) if quoted.span else loc + 1
            return CSTNode("QUOTE", None, [quoted],
                           make_span(self.filename, s, loc, end))

        quoted = (Suppress("'") + datum).set_parse_action(make_quote)

        datum <<= quoted | list_datum | atom
        datum.set_name("datum")

        program = ZeroOrMore(datum) + StringEnd()
        expression = datum + StringEnd()

        comment = Literal(";") + rest_of_line
        program.ignore(comment)
        expression.ignore(comment)

        if self.debug:
            datum.set_debug()

        self.datum = datum
        self.atom = atom
        self.list_datum = list_datum
        self.program = program
        self.expression = expression

    def parse_program(self, text: str) -> List[CSTNode]:
        """Parse every top-level datum in a program"""
        if not text.strip():
            return []
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise parse_error_from_exception(e, text, self.filename)
        return list(result)

    def parse_expression(self, text: str) -> CSTNode:
        """Parse exactly one datum"""
        try:
            result = self.expression.parse_string(text, parse_all=True)
        except ParseException as e:
            raise parse_error_from_exception(e, text, self.filename)
        return result[0]


class SchemeParser:
    """Parser front end, one grammar per source name"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def parse_file(self, filepath: str) -> List[CSTNode]:
        """Parse a Scheme source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise SchemeParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise SchemeParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        return self.parse_string(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> List[CSTNode]:
        """Parse Scheme source code from string"""
        nodes = SchemeGrammar(filename, self.debug).parse_program(text)
        if self.debug:
            print(f"Parsed {len(nodes)} top-level forms from {filename}")
        return nodes

    def parse_expression(self, text: str, filename: str = "<input>") -> CSTNode:
        """Parse a single Scheme expression"""
        return SchemeGrammar(filename, self.debug).parse_expression(text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> SchemeParser:
    """Create a Scheme parser"""
    return SchemeParser(debug=debug)


# Utility functions for working with CST
def find_nodes_by_type(cst: CSTNode, node_type: str) -> List[CSTNode]:
    """Find all nodes of a specific type in CST"""
    result = []

    def search(node: CSTNode):
        if node.type == node_type:
            result.append(node)
        for child in node.children:
            search(child)

    search(cst)
    return result


def pretty_print_cst(cst: CSTNode, indent: int = 0) -> str:
    """Pretty print a CST node for debugging"""
    result = "  " * indent + f"{cst.type}"
    if cst.value is not None:
        result += f"({repr(cst.value)})"
    result += "\n"

    for child in cst.children:
        result += pretty_print_cst(child, indent + 1)

    return result


def cst_to_dict(cst: CSTNode) -> Dict[str, Any]:
    """Convert CST to dictionary representation"""
    return {
        "type": cst.type,
        "value": cst.value,
        "span": {
            "filename": cst.span.filename,
            "start_line": cst.span.start_line,
            "start_col": cst.span.start_col,
            "end_line": cst.span.end_line,
            "end_col": cst.span.end_col,
        } if cst.span else None,
        "children": [cst_to_dict(child) for child in cst.children]
    }
