"""
Forklet expression trees
Programs are assembled directly as trees of AST node dictionaries;
nodes are never mutated after construction, so trees may be shared freely
"""

from typing import Dict, Sequence


LITERAL = "LITERAL"
VARIABLE = "VARIABLE"
APPLICATION = "APPLICATION"
LET = "LET"
IF = "IF"
SPAWN = "SPAWN"
SYNC = "SYNC"

NODE_TYPES = (LITERAL, VARIABLE, APPLICATION, LET, IF, SPAWN, SYNC)


def make_node(node_type: str, value) -> Dict:
  """Create an immutable AST node"""
  return {
      'type': node_type,
      'value': value
  }


def make_literal(value: Dict) -> Dict:
  return make_node(LITERAL, value)


def make_variable(name: str) -> Dict:
  return make_node(VARIABLE, name)


def make_application(callee: Dict, args: Sequence[Dict]) -> Dict:
  """Create a function application node; args stay unevaluated"""
  return make_node(APPLICATION, {
      'function': callee,
      'args': tuple(args)
  })


def make_call(name: str, *args: Dict) -> Dict:
  """Shorthand for applying the function bound to name"""
  return make_application(make_variable(name), args)


def make_let(name: str, value_expr: Dict, body: Dict) -> Dict:
  return make_node(LET, {
      'name': name,
      'value': value_expr,
      'body': body
  })


def make_if(cond: Dict, then_expr: Dict, else_expr: Dict) -> Dict:
  return make_node(IF, {
      'condition': cond,
      'then': then_expr,
      'else': else_expr
  })


def make_spawn(expr: Dict) -> Dict:
  return make_node(SPAWN, expr)


def make_sync(expr: Dict) -> Dict:
  return make_node(SYNC, expr)
