"""
Evaluator - Pure Functional Style
Applicative-order, lexically scoped evaluation of analyzed expressions
Environments are chains of frames; set! and letrec are the only mutation
"""

from typing import Dict, List, Optional, Tuple

from error_handling import (
  UnboundIdentifier,
  UnassignedIdentifier,
  NotCallable,
  TopLevelOnlyError,
)
from utilities import (
  arity_error,
  get_value_kind,
  type_mismatch_error,
)
from stdlib import (
  BUILTIN_PRIMITIVES,
  make_value,
  make_unspecified,
  apply_primitive,
  scheme_show,
)


# ============================================================================
# DATA STRUCTURES (Dictionaries)
# ============================================================================

def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Dict] = None) -> Dict:
  """Create an environment frame"""
  return {
      'parent': parent,
      'bindings': bindings or {}
  }


def make_closure(params: List[str], body: List[Dict], closure_env: Dict, name: Optional[str] = None) -> Dict:
  """Create a procedure value capturing its defining frame by reference"""
  return {
      'type': 'Closure',
      'params': params,
      'body': body,
      'closure_env': closure_env,
      'name': name
  }


def make_unassigned() -> Dict:
  """Placeholder for a letrec cell whose initializer has not finished"""
  return make_value(None, "Unassigned")


def make_execution_context(top_level: bool = False) -> Dict:
  """Create an execution context; define is only legal at top level"""
  return {
      'top_level': top_level
  }


NESTED_CONTEXT = make_execution_context(top_level=False)


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_find_frame(env: Dict, name: str) -> Optional[Dict]:
  """Innermost frame binding name, or None"""
  frame = env
  while frame is not None:
    if name in frame['bindings']:
      return frame
    frame = frame['parent']
  return None


def env_lookup_value(env: Dict, name: str) -> Dict:
  """Look up a value in the environment chain"""
  frame = env_find_frame(env, name)
  if frame is None:
    raise UnboundIdentifier(name)
  value = frame['bindings'][name]
  if value['type'] == "Unassigned":
    raise UnassignedIdentifier(name)
  return value


def env_extend(env: Dict, names: List[str], values: List[Dict], proc_name: str = "#<procedure>") -> Dict:
  """Return a child frame binding names[i] to values[i]"""
  if len(names) != len(values):
    raise arity_error(proc_name, len(names), len(names), len(values))
  return make_runtime_env(env, dict(zip(names, values)))


def env_define_value(env: Dict, name: str, value: Dict) -> None:
  """Install or replace a binding in this frame"""
  env['bindings'][name] = value


def env_set_value(env: Dict, name: str, value: Dict) -> None:
  """Overwrite the existing binding cell for name in place"""
  frame = env_find_frame(env, name)
  if frame is None:
    raise UnboundIdentifier(name)
  frame['bindings'][name] = value


def create_builtin_runtime_env() -> Dict:
  """Create a fresh top-level frame seeded with the primitives"""
  return make_runtime_env(None, dict(BUILTIN_PRIMITIVES))


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """
  Evaluate an AST node in env and return its value.
  Only forms evaluated with a top-level context may define.
  """
  if context is None:
    context = NESTED_CONTEXT

  node_type = ast_node['type']

  if debug:
    print(f"Evaluating: {node_type}")

  if node_type == "LITERAL":
    return ast_node['value']
  elif node_type == "IDENTIFIER":
    return eval_identifier(ast_node, env, debug, context)
  elif node_type == "LAMBDA":
    return eval_lambda(ast_node, env, debug, context)
  elif node_type == "IF":
    return eval_if(ast_node, env, debug, context)
  elif node_type == "APPLY":
    return eval_apply(ast_node, env, debug, context)
  elif node_type == "LET":
    return eval_let(ast_node, env, debug, context)
  elif node_type == "LETREC":
    return eval_letrec(ast_node, env, debug, context)
  elif node_type == "SET":
    return eval_set(ast_node, env, debug, context)
  elif node_type == "DEFINE":
    return eval_define(ast_node, env, debug, context)
  raise ValueError(f"Unknown node type: {node_type}")


def eval_sequence(body: List[Dict], env: Dict, debug: bool = False) -> Dict:
  """Evaluate body expressions in order, returning the last value"""
  result = make_unspecified()
  for expr in body:
    result = eval_ast(expr, env, debug, NESTED_CONTEXT)
  return result


def eval_identifier(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Evaluate identifier by looking up in environment"""
  return env_lookup_value(env, ast_node['value'])


def eval_lambda(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Evaluate lambda expression; the body is not touched until application"""
  value_dict = ast_node['value']
  return make_closure(value_dict['params'], value_dict['body'], env, value_dict.get('name'))


def eval_if(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Evaluate exactly one branch, chosen by a boolean test"""
  value_dict = ast_node['value']
  test = eval_ast(value_dict['test'], env, debug, NESTED_CONTEXT)
  if test['type'] != "Bool":
    raise type_mismatch_error("if", "boolean?", test, scheme_show)

  if test['value']:
    return eval_ast(value_dict['then'], env, debug, NESTED_CONTEXT)
  if value_dict['else'] is None:
    return make_unspecified()
  return eval_ast(value_dict['else'], env, debug, NESTED_CONTEXT)


def eval_apply(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Evaluate function application"""
  value_dict = ast_node['value']
  proc = eval_ast(value_dict['operator'], env, debug, NESTED_CONTEXT)
  if proc['type'] not in ("Closure", "Primitive"):
    raise NotCallable(get_value_kind(proc), scheme_show(proc))

  args = [eval_ast(operand, env, debug, NESTED_CONTEXT) for operand in value_dict['operands']]
  return apply_procedure(proc, args, debug)


def apply_procedure(proc: Dict, args: List[Dict], debug: bool = False) -> Dict:
  """Apply a closure or primitive to already evaluated arguments"""
  if debug:
    shown_args = " ".join(scheme_show(arg) for arg in args)
    print(f"Applying {scheme_show(proc)} to ({shown_args})")

  if proc['type'] == "Primitive":
    return apply_primitive(proc, args)
  elif proc['type'] == "Closure":
    # Extend the captured frame, never the caller's
    frame = env_extend(proc['closure_env'], proc['params'], args, proc['name'] or "#<procedure>")
    return eval_sequence(proc['body'], frame, debug)
  raise NotCallable(get_value_kind(proc), scheme_show(proc))


def eval_let(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Initializers see only the outer scope; body sees all bindings at once"""
  bindings = ast_node['value']['bindings']
  names = [name for name, _ in bindings]
  values = [eval_ast(expr, env, debug, NESTED_CONTEXT) for _, expr in bindings]
  frame = env_extend(env, names, values, "let")
  return eval_sequence(ast_node['value']['body'], frame, debug)


def eval_letrec(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Bind placeholder cells first, then fill them from inside the new frame"""
  bindings = ast_node['value']['bindings']
  names = [name for name, _ in bindings]
  frame = env_extend(env, names, [make_unassigned() for _ in names], "letrec")

  for name, expr in bindings:
    env_set_value(frame, name, eval_ast(expr, frame, debug, NESTED_CONTEXT))

  return eval_sequence(ast_node['value']['body'], frame, debug)


def eval_set(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Mutate an existing binding"""
  value_dict = ast_node['value']
  name = value_dict['name']
  # Fail before evaluating the new value when there is no cell to assign
  if env_find_frame(env, name) is None:
    raise UnboundIdentifier(name)
  value = eval_ast(value_dict['value'], env, debug, NESTED_CONTEXT)
  env_set_value(env, name, value)
  return make_unspecified()


def eval_define(ast_node: Dict, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """Install a binding into the top-level frame"""
  value_dict = ast_node['value']
  name = value_dict['name']
  if context is None or not context['top_level']:
    raise TopLevelOnlyError(name)

  value = eval_ast(value_dict['value'], env, debug, NESTED_CONTEXT)
  env_define_value(env, name, value)

  if debug:
    print(f"Defined {name} = {scheme_show(value)}")

  return make_unspecified()


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def eval_program(ast_nodes: List[Dict], debug: bool = False, env: Optional[Dict] = None) -> Tuple[Dict, Dict]:
  """
  Evaluate top-level forms in order.
  Returns (value of the last form, top-level environment); a fresh top-level
  environment is created unless one is given.
  """
  if env is None:
    env = create_builtin_runtime_env()

  top_level = make_execution_context(top_level=True)
  result = make_unspecified()
  for ast_node in ast_nodes:
    result = eval_ast(ast_node, env, debug, top_level)

  return result, env


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False):
  """Factory function returning an interpreter with its own top-level frame"""
  global_env = create_builtin_runtime_env()

  def interpret_program_func(ast_nodes):
    value, _ = eval_program(ast_nodes, debug, global_env)
    return value

  def user_bindings():
    return {name: value for name, value in global_env['bindings'].items()
            if name not in BUILTIN_PRIMITIVES or value is not BUILTIN_PRIMITIVES[name]}

  return type('Interpreter', (), {
      'interpret_program': lambda self, ast_nodes: interpret_program_func(ast_nodes),
      'user_bindings': lambda self: user_bindings(),
      'global_env': global_env,
  })()
