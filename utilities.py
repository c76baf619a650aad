"""
Utilities module for the Y-combinator evaluator
Contains common helper functions to reduce code duplication
"""

from typing import Any, Dict, List, Optional, Callable, Tuple
from functools import reduce

from error_handling import ArityError, TypeMismatch


# ==================== TYPE CHECKING UTILITIES ====================

def get_value_kind(val: Dict) -> str:
  """
  Name the kind of a runtime value for error messages

  Examples:
    get_value_kind({"type": "Num", "value": 1}) -> "number"
    get_value_kind({"type": "Closure", ...}) -> "procedure"
  """
  kinds = {
      'Num': 'number',
      'Bool': 'boolean',
      'Symbol': 'symbol',
      'Pair': 'pair',
      'EmptyList': 'empty list',
      'Closure': 'procedure',
      'Primitive': 'procedure',
      'Unspecified': 'void',
  }
  return kinds.get(val.get('type'), 'unknown') if isinstance(val, dict) else 'unknown'


# ==================== ERROR MESSAGE BUILDERS ====================

def describe_arity(min_arity: int, max_arity: Optional[int]) -> str:
  """
  Render an arity range the way the error messages print it

  Examples:
    describe_arity(2, 2) -> "2"
    describe_arity(1, None) -> "at least 1"
    describe_arity(0, 1) -> "0 to 1"
  """
  if max_arity is None:
    return f"at least {min_arity}"
  if min_arity == max_arity:
    return str(min_arity)
  return f"{min_arity} to {max_arity}"


def arity_error(func_name: str, min_arity: int, max_arity: Optional[int], got: int) -> ArityError:
  """
  Generate arity mismatch error

  Args:
    func_name: Procedure name
    min_arity: Fewest arguments accepted
    max_arity: Most arguments accepted, None when variadic
    got: Actual number of arguments

  Returns:
    ArityError with formatted message
  """
  return ArityError(func_name, describe_arity(min_arity, max_arity), got)


def type_mismatch_error(operation: str, expected: str, actual: Dict, show: Callable[[Dict], str]) -> TypeMismatch:
  """
  Generate type mismatch error

  Args:
    operation: Primitive or special form name
    expected: Expected predicate, e.g. "number?"
    actual: Actual value dict
    show: Printer used to render the offending value

  Returns:
    TypeMismatch with formatted message
  """
  return TypeMismatch(expected, show(actual), operation)


# ==================== VALIDATION UTILITIES ====================

def check_arity(func_name: str, args: List[Dict], min_arity: int, max_arity: Optional[int]) -> None:
  """
  Validate an argument count against an arity range

  Raises:
    ArityError if validation fails
  """
  if len(args) < min_arity or (max_arity is not None and len(args) > max_arity):
    raise arity_error(func_name, min_arity, max_arity, len(args))


def validate_function_args(
  func_name: str,
  args: List[Dict],
  expected_types: List[Tuple[str, str]],
  show: Callable[[Dict], str]
) -> None:
  """
  Validate arguments against (type tag, predicate name) pairs

  Args:
    func_name: Function name for error messages
    args: List of argument values
    expected_types: One (type tag, predicate name) pair per argument
    show: Printer used in the error message

  Raises:
    TypeMismatch on the first argument of the wrong type
  """
  for arg, (type_tag, predicate) in zip(args, expected_types):
    if arg.get('type') != type_tag:
      raise type_mismatch_error(func_name, predicate, arg, show)


# ==================== NUMERIC OPERATION FACTORIES ====================

def variadic_arithmetic_op(
  op: Callable[[Any, Any], Any],
  op_name: str,
  identity: Optional[int] = None,
  unary: Optional[Callable[[Any], Any]] = None
) -> Callable[[List[Dict], Callable, Callable], Dict]:
  """
  Factory for folding arithmetic operations over any number of numbers

  Args:
    op: Python operator function (e.g., operator.add)
    op_name: Name for error messages
    identity: Result for zero arguments
    unary: Applied to the only argument when exactly one is given

  Returns:
    Function taking (args, make_value, show)

  Examples:
    scheme_add = variadic_arithmetic_op(operator.add, "+", identity=0)
    scheme_sub = variadic_arithmetic_op(operator.sub, "-", unary=operator.neg)
  """
  def arithmetic(args: List[Dict], make_value: Callable, show: Callable) -> Dict:
    validate_function_args(op_name, args, [("Num", "number?")] * len(args), show)
    numbers = [arg['value'] for arg in args]
    if not numbers:
      return make_value(identity, "Num")
    if len(numbers) == 1 and unary is not None:
      return make_value(unary(numbers[0]), "Num")
    return make_value(reduce(op, numbers), "Num")

  return arithmetic


def chained_comparison_op(
  op: Callable[[Any, Any], bool],
  op_name: str
) -> Callable[[List[Dict], Callable, Callable], Dict]:
  """
  Factory for comparisons that hold pairwise along the argument list

  Examples:
    scheme_lt = chained_comparison_op(operator.lt, "<")
    scheme_lt([one, two, three], make_value, show) -> #t
  """
  def comparison(args: List[Dict], make_value: Callable, show: Callable) -> Dict:
    validate_function_args(op_name, args, [("Num", "number?")] * len(args), show)
    numbers = [arg['value'] for arg in args]
    result = all(op(a, b) for a, b in zip(numbers, numbers[1:]))
    return make_value(result, "Bool")

  return comparison
