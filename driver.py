"""
Driver for the worked examples
Runs Scheme source end to end and reports each outcome the way the
derivation's inline comments print it
"""

from typing import Dict, List, Optional

from parsing import create_parser
from semantics import create_analyzer, SchemeSemanticsError
from interpreter import eval_program
from error_handling import SchemeParseError, SchemeRuntimeError
from stdlib import scheme_show
from snippets import EXAMPLES


# ============================================================================
# OUTCOMES
# ============================================================================

def make_success_outcome(value: Dict) -> Dict:
  return {
      'status': 'success',
      'value': value,
      'text': scheme_show(value)
  }


def make_error_outcome(kind: str, message: str) -> Dict:
  return {
      'status': 'error',
      'kind': kind,
      'message': message
  }


def format_outcome(outcome: Dict) -> str:
  """Value text for a success, the error message for a failure"""
  if outcome['status'] == 'success':
    return outcome['text']
  return outcome['message']


# ============================================================================
# RUNNING PROGRAMS
# ============================================================================

def run_source(source: str, debug: bool = False, filename: str = "<input>") -> Dict:
  """
  Parse, analyze and evaluate a whole program in a fresh top-level
  environment. Errors never escape: they become error outcomes.
  """
  try:
    cst_nodes = create_parser(debug).parse_string(source, filename)
    ast_nodes = create_analyzer(debug).analyze(cst_nodes)
  except SchemeParseError as e:
    return make_error_outcome("ParseError", str(e))
  except SchemeSemanticsError as e:
    return make_error_outcome("SyntaxError", e.message)

  try:
    value, _ = eval_program(ast_nodes, debug)
  except SchemeRuntimeError as e:
    return make_error_outcome(e.kind, e.message)
  except RecursionError:
    return make_error_outcome("RecursionDepthExceeded",
                              "recursion depth exceeded while evaluating the program")

  return make_success_outcome(value)


def run_example(name: str, debug: bool = False) -> Dict:
  """Run one registered example by name"""
  if name not in EXAMPLES:
    raise KeyError(f"Unknown example: {name}")
  return run_source(EXAMPLES[name]['source'], debug, filename=name)


def check_example(name: str, debug: bool = False) -> Dict:
  """Run an example and compare its printed outcome with the expected text"""
  outcome = run_example(name, debug)
  actual = format_outcome(outcome)
  expected = EXAMPLES[name]['expected']
  return {
      'name': name,
      'expected': expected,
      'actual': actual,
      'passed': actual == expected
  }


def check_examples(names: Optional[List[str]] = None, debug: bool = False) -> List[Dict]:
  return [check_example(name, debug) for name in (names or list(EXAMPLES))]


# ============================================================================
# REPORT
# ============================================================================

def render_report(names: Optional[List[str]] = None, show_source: bool = False, debug: bool = False) -> str:
  """One line per example: its name, then what it evaluates to"""
  names = names or list(EXAMPLES)
  width = max(len(name) for name in names)
  lines = []

  for name in names:
    example = EXAMPLES[name]
    if show_source:
      lines.append(f";; {name}: {example['description']}")
      lines.append(example['source'].rstrip())
    outcome = run_example(name, debug)
    lines.append(f"{name:<{width}}  ; => {format_outcome(outcome)}")
    if show_source:
      lines.append("")

  return "\n".join(lines)
