"""
Syntactic analysis - Pure Functional Style
Turns reader datums into expression nodes for the evaluator
"""

from typing import Any, Dict, List, Optional, Tuple
from parsing import CSTNode, SourceSpan
from stdlib import make_number, make_boolean, make_symbol, make_list


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_ast_node(node_type: str, value: Any, span: Optional[SourceSpan] = None) -> Dict:
  """Create an AST node dictionary"""
  return {
      'type': node_type,
      'value': value,
      'span': span
  }


class SchemeSemanticsError(Exception):
  """Malformed special form"""

  def __init__(self, message: str, span: Optional[SourceSpan] = None):
    self.message = message
    self.span = span
    super().__init__(self._format_error())

  def _format_error(self) -> str:
    if self.span:
      return f"Syntax error at {self.span}: {self.message}"
    return f"Syntax error: {self.message}"


def bad_syntax(form: str, node: CSTNode, detail: str = "") -> SchemeSemanticsError:
  message = f"{form}: bad syntax in: {node}"
  if detail:
    message += f" ({detail})"
  return SchemeSemanticsError(message, node.span)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def is_symbol(node: CSTNode, name: Optional[str] = None) -> bool:
  return node.type == "SYMBOL" and (name is None or node.value == name)


def head_symbol(node: CSTNode) -> Optional[str]:
  """Name of the leading symbol of a combination, if any"""
  if node.type == "LIST" and node.children and is_symbol(node.children[0]):
    return node.children[0].value
  return None


def check_unique(form: str, names: List[str], node: CSTNode) -> None:
  seen = set()
  for name in names:
    if name in seen:
      raise bad_syntax(form, node, f"duplicate identifier {name}")
    seen.add(name)


def extract_params(form: str, params_node: CSTNode, whole: CSTNode) -> List[str]:
  """Parameter names of a lambda list"""
  if params_node.type != "LIST":
    raise bad_syntax(form, whole, "expected a parameter list")
  names = []
  for param in params_node.children:
    if not is_symbol(param):
      raise bad_syntax(form, whole, f"not an identifier: {param}")
    names.append(param.value)
  check_unique(form, names, whole)
  return names


def binding_names(form: str, bindings_node: CSTNode, whole: CSTNode) -> List[str]:
  """Names bound by a let or letrec binding list"""
  if bindings_node.type != "LIST":
    raise bad_syntax(form, whole, "expected a binding list")
  names = []
  for binding in bindings_node.children:
    if binding.type != "LIST" or len(binding.children) != 2 or not is_symbol(binding.children[0]):
      raise bad_syntax(form, whole, f"not a binding pair: {binding}")
    names.append(binding.children[0].value)
  check_unique(form, names, whole)
  return names


def extract_bindings(form: str, bindings_node: CSTNode, whole: CSTNode,
                     env: Dict, debug: bool) -> List[Tuple[str, Dict]]:
  """(name expr) pairs of a let or letrec"""
  names = binding_names(form, bindings_node, whole)
  exprs = [analyze_cst_node(binding.children[1], env, debug) for binding in bindings_node.children]
  return [(name, name_lambda(expr, name)) for name, expr in zip(names, exprs)]


def name_lambda(expr: Dict, name: str) -> Dict:
  """Closures report the name they were first bound to"""
  if expr['type'] == "LAMBDA" and expr['value']['name'] is None:
    return make_ast_node("LAMBDA", {**expr['value'], 'name': name}, expr['span'])
  return expr


def shadow_names(env: Dict, names: List[str]) -> Dict:
  """Analysis env for a scope that binds names"""
  return {**env, 'shadowed': env['shadowed'] | frozenset(names)}


def analyze_body(form: str, body_nodes: List[CSTNode], whole: CSTNode,
                 env: Dict, debug: bool) -> List[Dict]:
  if not body_nodes:
    raise bad_syntax(form, whole, "empty body")
  return [analyze_cst_node(node, env, debug) for node in body_nodes]


# ============================================================================
# QUOTED DATA
# ============================================================================

def datum_to_value(node: CSTNode) -> Dict:
  """Convert a quoted datum to a runtime value"""
  if node.type == "NUMBER":
    return make_number(node.value)
  elif node.type == "BOOLEAN":
    return make_boolean(node.value)
  elif node.type == "SYMBOL":
    return make_symbol(node.value)
  elif node.type == "LIST":
    return make_list([datum_to_value(child) for child in node.children])
  elif node.type == "QUOTE":
    return make_list([make_symbol("quote"), datum_to_value(node.children[0])])
  raise SchemeSemanticsError(f"quote: cannot quote {node}", node.span)


# ============================================================================
# SPECIAL FORMS
# ============================================================================

def analyze_quote(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  args = node.children[1:]
  if len(args) != 1:
    raise bad_syntax("quote", node)
  return make_ast_node("LITERAL", datum_to_value(args[0]), node.span)


def analyze_lambda(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """(lambda (params...) body...)"""
  if len(node.children) < 3:
    raise bad_syntax("lambda", node)
  params = extract_params("lambda", node.children[1], node)
  body = analyze_body("lambda", node.children[2:], node, shadow_names(env, params), debug)
  return make_ast_node("LAMBDA", {'params': params, 'body': body, 'name': None}, node.span)


def analyze_if(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """(if test then [else])"""
  args = node.children[1:]
  if len(args) not in (2, 3):
    raise bad_syntax("if", node)
  parts = [analyze_cst_node(arg, env, debug) for arg in args]
  return make_ast_node("IF", {
      'test': parts[0],
      'then': parts[1],
      'else': parts[2] if len(parts) == 3 else None
  }, node.span)


def analyze_let(node: CSTNode, env: Dict, debug: bool = False, form: str = "let") -> Dict:
  """(let ((name expr)...) body...) and the letrec variant"""
  if len(node.children) < 3:
    raise bad_syntax(form, node)
  names = binding_names(form, node.children[1], node)
  body_env = shadow_names(env, names)
  # letrec initializers see their own bindings, let initializers do not
  init_env = body_env if form == "letrec" else env
  bindings = extract_bindings(form, node.children[1], node, init_env, debug)
  body = analyze_body(form, node.children[2:], node, body_env, debug)
  return make_ast_node("LETREC" if form == "letrec" else "LET",
                       {'bindings': bindings, 'body': body}, node.span)


def analyze_letrec(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  return analyze_let(node, env, debug, form="letrec")


def analyze_set(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """(set! name expr)"""
  args = node.children[1:]
  if len(args) != 2 or not is_symbol(args[0]):
    raise bad_syntax("set!", node)
  return make_ast_node("SET", {
      'name': args[0].value,
      'value': analyze_cst_node(args[1], env, debug)
  }, node.span)


def analyze_define(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """(define name expr) or (define (name params...) body...)"""
  args = node.children[1:]
  if len(args) < 2:
    raise bad_syntax("define", node)

  target = args[0]
  if is_symbol(target):
    if len(args) != 2:
      raise bad_syntax("define", node, "multiple expressions after identifier")
    name = target.value
    value = analyze_cst_node(args[1], env, debug)
  elif target.type == "LIST" and target.children and is_symbol(target.children[0]):
    name = target.children[0].value
    params_node = CSTNode("LIST", None, target.children[1:], target.span)
    params = extract_params("define", params_node, node)
    body = analyze_body("define", args[1:], node, shadow_names(env, params), debug)
    value = make_ast_node("LAMBDA", {'params': params, 'body': body, 'name': name}, node.span)
  else:
    raise bad_syntax("define", node, "expected an identifier")

  return make_ast_node("DEFINE", {'name': name, 'value': name_lambda(value, name)}, node.span)


SPECIAL_FORMS = {
    'quote': analyze_quote,
    'lambda': analyze_lambda,
    'if': analyze_if,
    'let': analyze_let,
    'letrec': analyze_letrec,
    'set!': analyze_set,
    'define': analyze_define,
}


# ============================================================================
# ANALYSIS
# ============================================================================

def analyze_application(node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """(operator operands...)"""
  operator_node = analyze_cst_node(node.children[0], env, debug)
  operands = [analyze_cst_node(child, env, debug) for child in node.children[1:]]
  return make_ast_node("APPLY", {'operator': operator_node, 'operands': operands}, node.span)


def analyze_cst_node(cst_node: CSTNode, env: Dict, debug: bool = False) -> Dict:
  """Analyze one datum as an expression"""
  if debug:
    print(f"Analyzing CST node: {cst_node.type}")

  node_type = cst_node.type

  if node_type == "NUMBER":
    return make_ast_node("LITERAL", make_number(cst_node.value), cst_node.span)
  elif node_type == "BOOLEAN":
    return make_ast_node("LITERAL", make_boolean(cst_node.value), cst_node.span)
  elif node_type == "SYMBOL":
    return make_ast_node("IDENTIFIER", cst_node.value, cst_node.span)
  elif node_type == "QUOTE":
    return make_ast_node("LITERAL", datum_to_value(cst_node.children[0]), cst_node.span)
  elif node_type == "LIST":
    if not cst_node.children:
      raise SchemeSemanticsError("#%app: missing procedure expression in: ()", cst_node.span)
    head = head_symbol(cst_node)
    # Special form keywords can be shadowed by local bindings
    if head in SPECIAL_FORMS and head not in env['shadowed']:
      return SPECIAL_FORMS[head](cst_node, env, debug)
    return analyze_application(cst_node, env, debug)
  raise SchemeSemanticsError(f"Unknown CST node type: {node_type}", cst_node.span)


def create_analysis_env(shadowed: Optional[List[str]] = None) -> Dict:
  """Names that are not treated as special form keywords"""
  return {'shadowed': frozenset(shadowed or [])}


def analyze_program(cst_nodes: List[CSTNode], debug: bool = False) -> List[Dict]:
  """Analyze every top-level form"""
  env = create_analysis_env()
  return [analyze_cst_node(node, env, debug) for node in cst_nodes]


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_analyzer(debug: bool = False):
  """Factory function returning an analyzer"""
  def analyzer(cst_nodes):
    return analyze_program(cst_nodes, debug)

  def analyze_one(cst_node):
    return analyze_cst_node(cst_node, create_analysis_env(), debug)

  return type('Analyzer', (), {
      'analyze': lambda self, cst_nodes: analyzer(cst_nodes),
      'analyze_expression': lambda self, cst_node: analyze_one(cst_node),
  })()
