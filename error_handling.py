"""
Error handling for the Y-combinator evaluator
Parse errors with detailed context, plus the runtime error kinds
"""

from typing import List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += f"  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseException) -> List[str]:
    """Extract expected tokens from exception"""
    expected = []

    msg = str(exc)
    if "Expected" in msg:
        expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", msg)
        if expected_match:
            expected.append(expected_match.group(1))

    return expected if expected else ["a datum"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of line"
    return "end of input"


def count_parentheses(source_text: str) -> int:
    """Return open minus close parentheses, ignoring comments"""
    depth = 0
    for line in source_text.split('\n'):
        if ';' in line:
            line = line[:line.index(';')]
        depth += line.count('(') + line.count('[')
        depth -= line.count(')') + line.count(']')
    return depth


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    depth = count_parentheses(source_text)
    if depth > 0:
        suggestions.append(f"{depth} unclosed parenthesis(es) - add ')' to close them")
    elif depth < 0:
        suggestions.append(f"{-depth} extra ')' - remove the unmatched closing parenthesis(es)")

    if got.startswith("')") or got.startswith("']"):
        suggestions.append("A closing parenthesis appears without a matching '('")

    if "{" in got or "}" in got:
        suggestions.append("Use parentheses () or brackets [] instead of braces {}")

    if '"' in got:
        suggestions.append("String literals are not supported")

    return suggestions


def enhance_parse_exception_dict(exc: ParseException, source_text: str) -> Dict:
    """Convert pyparsing exception to an enhanced parse error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got)

    return make_parse_error(
        message=exc.msg,
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class SchemeParseError(Exception):
    """Scheme source could not be read"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return f"{self.filename}: " + format_parse_error(error_dict)


def parse_error_from_exception(exc: ParseException, source_text: str,
                               filename: str = "<input>") -> SchemeParseError:
    """Wrap a pyparsing exception as a SchemeParseError"""
    error_dict = enhance_parse_exception_dict(exc, source_text)
    return SchemeParseError(filename=filename, **error_dict)


class SchemeRuntimeError(Exception):
    """Base class for every error raised while evaluating a program"""

    kind = "RuntimeError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict:
        return {'kind': self.kind, 'message': self.message}


class UnboundIdentifier(SchemeRuntimeError):
    """Identifier lookup exhausted the environment chain"""

    kind = "UnboundIdentifier"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name}: unbound identifier in: {name}")


class UnassignedIdentifier(SchemeRuntimeError):
    """A letrec binding was read before its initializer finished"""

    kind = "UnassignedIdentifier"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name}: undefined; cannot use before initialization")


class ArityError(SchemeRuntimeError):
    kind = "ArityError"

    def __init__(self, name: str, expected: str, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"{name}: arity mismatch; expected: {expected}, given: {got}")


class TypeMismatch(SchemeRuntimeError):
    kind = "TypeMismatch"

    def __init__(self, expected: str, actual: str, operation: str):
        self.expected = expected
        self.actual = actual
        self.operation = operation
        super().__init__(f"{operation}: contract violation; expected: {expected}, given: {actual}")


class NotCallable(SchemeRuntimeError):
    kind = "NotCallable"

    def __init__(self, value_kind: str, shown: str = ""):
        self.value_kind = value_kind
        given = shown or value_kind
        super().__init__(
            f"application: not a procedure; expected a procedure that can be applied to arguments, given: {given}"
        )


class TopLevelOnlyError(SchemeRuntimeError):
    kind = "TopLevelOnlyError"

    def __init__(self, name: str = ""):
        self.name = name
        where = f" (defining {name})" if name else ""
        super().__init__(f"define: not allowed in an expression context{where}")
