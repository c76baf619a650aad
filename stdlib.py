"""
Standard library for the Y-combinator evaluator
Runtime value constructors, the printer, and the primitive procedures
Pure functional style using dictionaries
"""

from typing import Dict, Callable, Any, List, Optional
import operator
from utilities import (
  variadic_arithmetic_op,
  chained_comparison_op,
  validate_function_args,
  type_mismatch_error,
  check_arity,
)


# ============================================================================
# VALUE CONSTRUCTORS
# ============================================================================

def make_value(value: Any, type_name: str = "Unknown") -> Dict:
  """Create a runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def make_number(n: int) -> Dict:
  return make_value(n, "Num")


def make_boolean(b: bool) -> Dict:
  return make_value(bool(b), "Bool")


def make_symbol(name: str) -> Dict:
  return make_value(name, "Symbol")


def make_pair(car: Dict, cdr: Dict) -> Dict:
  """Create a cons cell"""
  return make_value({'car': car, 'cdr': cdr}, "Pair")


def make_empty_list() -> Dict:
  return make_value(None, "EmptyList")


def make_unspecified() -> Dict:
  """Result of set! and define"""
  return make_value(None, "Unspecified")


def make_list(items: List[Dict]) -> Dict:
  """Build a proper list from Python list of values"""
  result = make_empty_list()
  for item in reversed(items):
    result = make_pair(item, result)
  return result


def list_to_python(lst: Dict) -> List[Dict]:
  """Collect the elements of a proper list"""
  items = []
  while lst['type'] == "Pair":
    items.append(lst['value']['car'])
    lst = lst['value']['cdr']
  return items


# ============================================================================
# PRINTER
# ============================================================================

def scheme_show(value: Dict) -> str:
  """Convert value to its Scheme external representation"""
  value_type = value['type']
  if value_type == "Num":
    return str(value['value'])
  elif value_type == "Bool":
    return "#t" if value['value'] else "#f"
  elif value_type == "Symbol":
    return value['value']
  elif value_type == "EmptyList":
    return "()"
  elif value_type == "Pair":
    return "(" + show_pair_contents(value) + ")"
  elif value_type == "Closure":
    name = value.get('name')
    return f"#<procedure:{name}>" if name else "#<procedure>"
  elif value_type == "Primitive":
    return f"#<primitive:{value['name']}>"
  elif value_type == "Unspecified":
    return "#<void>"
  else:
    return f"#<{value_type}>"


def show_pair_contents(pair: Dict) -> str:
  """Render list elements, using dot notation for an improper tail"""
  parts = []
  current = pair
  while current['type'] == "Pair":
    parts.append(scheme_show(current['value']['car']))
    current = current['value']['cdr']
  if current['type'] != "EmptyList":
    parts.append(".")
    parts.append(scheme_show(current))
  return " ".join(parts)


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

_scheme_add_impl = variadic_arithmetic_op(operator.add, "+", identity=0)
_scheme_mul_impl = variadic_arithmetic_op(operator.mul, "*", identity=1)
_scheme_sub_impl = variadic_arithmetic_op(operator.sub, "-", unary=operator.neg)


def scheme_add(*args: Dict) -> Dict:
  """Addition"""
  return _scheme_add_impl(list(args), make_value, scheme_show)


def scheme_sub(*args: Dict) -> Dict:
  """Subtraction, or negation with one argument"""
  return _scheme_sub_impl(list(args), make_value, scheme_show)


def scheme_mul(*args: Dict) -> Dict:
  """Multiplication"""
  return _scheme_mul_impl(list(args), make_value, scheme_show)


def scheme_add1(n: Dict) -> Dict:
  validate_function_args("add1", [n], [("Num", "number?")], scheme_show)
  return make_number(n['value'] + 1)


def scheme_sub1(n: Dict) -> Dict:
  validate_function_args("sub1", [n], [("Num", "number?")], scheme_show)
  return make_number(n['value'] - 1)


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

_scheme_eq_impl = chained_comparison_op(operator.eq, "=")
_scheme_lt_impl = chained_comparison_op(operator.lt, "<")
_scheme_gt_impl = chained_comparison_op(operator.gt, ">")


def scheme_num_eq(*args: Dict) -> Dict:
  """Numeric equality"""
  return _scheme_eq_impl(list(args), make_value, scheme_show)


def scheme_lt(*args: Dict) -> Dict:
  return _scheme_lt_impl(list(args), make_value, scheme_show)


def scheme_gt(*args: Dict) -> Dict:
  return _scheme_gt_impl(list(args), make_value, scheme_show)


def scheme_zero_p(n: Dict) -> Dict:
  validate_function_args("zero?", [n], [("Num", "number?")], scheme_show)
  return make_boolean(n['value'] == 0)


def scheme_not(x: Dict) -> Dict:
  """#t only for #f"""
  return make_boolean(x['type'] == "Bool" and not x['value'])


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def scheme_null_p(x: Dict) -> Dict:
  """True only for the empty list"""
  return make_boolean(x['type'] == "EmptyList")


def scheme_pair_p(x: Dict) -> Dict:
  return make_boolean(x['type'] == "Pair")


def scheme_cons(car: Dict, cdr: Dict) -> Dict:
  return make_pair(car, cdr)


def scheme_car(pair: Dict) -> Dict:
  """First element of a pair"""
  if pair['type'] != "Pair":
    raise type_mismatch_error("car", "pair?", pair, scheme_show)
  return pair['value']['car']


def scheme_cdr(pair: Dict) -> Dict:
  """Rest of a pair"""
  if pair['type'] != "Pair":
    raise type_mismatch_error("cdr", "pair?", pair, scheme_show)
  return pair['value']['cdr']


def scheme_list(*items: Dict) -> Dict:
  return make_list(list(items))


# ============================================================================
# BUILT-IN PRIMITIVE REGISTRY
# ============================================================================

def make_primitive(name: str, func: Callable, min_arity: int, max_arity: Optional[int]) -> Dict:
  """Create a primitive procedure value"""
  return {
      'type': 'Primitive',
      'name': name,
      'func': func,
      'min_arity': min_arity,
      'max_arity': max_arity
  }


def apply_primitive(primitive: Dict, args: List[Dict]) -> Dict:
  """Check the argument count, then call the native implementation"""
  check_arity(primitive['name'], args, primitive['min_arity'], primitive['max_arity'])
  return primitive['func'](*args)


BUILTIN_PRIMITIVES: Dict[str, Dict] = {
    # Arithmetic
    "+": make_primitive("+", scheme_add, 0, None),
    "-": make_primitive("-", scheme_sub, 1, None),
    "*": make_primitive("*", scheme_mul, 0, None),
    "add1": make_primitive("add1", scheme_add1, 1, 1),
    "sub1": make_primitive("sub1", scheme_sub1, 1, 1),

    # Comparison
    "=": make_primitive("=", scheme_num_eq, 1, None),
    "<": make_primitive("<", scheme_lt, 1, None),
    ">": make_primitive(">", scheme_gt, 1, None),
    "zero?": make_primitive("zero?", scheme_zero_p, 1, 1),
    "not": make_primitive("not", scheme_not, 1, 1),

    # Lists
    "null?": make_primitive("null?", scheme_null_p, 1, 1),
    "pair?": make_primitive("pair?", scheme_pair_p, 1, 1),
    "cons": make_primitive("cons", scheme_cons, 2, 2),
    "car": make_primitive("car", scheme_car, 1, 1),
    "cdr": make_primitive("cdr", scheme_cdr, 1, 1),
    "list": make_primitive("list", scheme_list, 0, None),
}
