"""
Forklet Standard Library
The fixed set of builtin primitives, dispatched by name at application time
Pure functional style using immutable dictionaries
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple
import operator

from error_handling import EmptyCollectionError, ForkletTypeError
from values import (
  BOOLEAN,
  VECTOR,
  make_boolean,
  make_vector,
  value_type,
  values_equal
)
from utilities import binary_arithmetic_op, expect_type, validate_arity


# Evaluator callback: (expr, env, context) -> (value, env)
Evaluate = Callable[[Dict, Dict, Optional[Dict]], Tuple[Dict, Dict]]


# ============================================================================
# ARGUMENT EVALUATION
# ============================================================================

def eval_args(args: Sequence[Dict], env: Dict, context: Dict,
              evaluate: Evaluate) -> Tuple[List[Dict], Dict]:
  """Evaluate argument expressions left-to-right, threading the environment"""
  values = []
  for arg in args:
    value, env = evaluate(arg, env, context)
    values.append(value)
  return values, env


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

_add_impl = binary_arithmetic_op(operator.add, "+")
_sub_impl = binary_arithmetic_op(operator.sub, "-")


def builtin_add(args, env, context, evaluate):
  """Integer addition"""
  validate_arity("+", args, 2)
  (x, y), env = eval_args(args, env, context, evaluate)
  return _add_impl(x, y), env


def builtin_sub(args, env, context, evaluate):
  """Integer subtraction (first - second)"""
  validate_arity("-", args, 2)
  (x, y), env = eval_args(args, env, context, evaluate)
  return _sub_impl(x, y), env


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

def builtin_eq(args, env, context, evaluate):
  """Structural equality; never fails"""
  validate_arity("=", args, 2)
  (x, y), env = eval_args(args, env, context, evaluate)
  return make_boolean(values_equal(x, y)), env


# ============================================================================
# CONTROL FUNCTIONS
# ============================================================================

def builtin_if(args, env, context, evaluate):
  """Evaluate the condition, then only the selected branch"""
  validate_arity("if", args, 3)
  condition, env = evaluate(args[0], env, context)
  if value_type(condition) != BOOLEAN:
    raise ForkletTypeError("condition must be boolean", function="if",
                           expected=BOOLEAN, got=value_type(condition))
  if condition['value']:
    return evaluate(args[1], env, context)
  return evaluate(args[2], env, context)


# ============================================================================
# VECTOR FUNCTIONS
# ============================================================================

def builtin_cons(args, env, context, evaluate):
  """Prepend element to vector, producing a new vector"""
  validate_arity("cons", args, 2)
  (elem, vec), env = eval_args(args, env, context, evaluate)
  expect_type("cons", "argument 2", vec, VECTOR)
  return make_vector((elem,) + vec['value']), env


def builtin_head(args, env, context, evaluate):
  """Get first element of a vector"""
  validate_arity("head", args, 1)
  vec, env = evaluate(args[0], env, context)
  expect_type("head", "argument 1", vec, VECTOR)
  if not vec['value']:
    raise EmptyCollectionError("head")
  return vec['value'][0], env


def builtin_tail(args, env, context, evaluate):
  """Get tail (all but first element) of a vector"""
  validate_arity("tail", args, 1)
  vec, env = evaluate(args[0], env, context)
  expect_type("tail", "argument 1", vec, VECTOR)
  if not vec['value']:
    raise EmptyCollectionError("tail")
  return make_vector(vec['value'][1:]), env


# ============================================================================
# DISPATCH TABLE
# ============================================================================

def make_builtin(name: str, params: Sequence[str], func: Callable) -> Dict:
  """Describe a builtin: its placeholder parameter names and implementation"""
  return {
      'type': 'builtin_function',
      'name': name,
      'params': tuple(params),
      'arity': len(params),
      'func': func
  }


BUILTINS = {
    '+': make_builtin('+', ['x', 'y'], builtin_add),
    '-': make_builtin('-', ['x', 'y'], builtin_sub),
    '=': make_builtin('=', ['x', 'y'], builtin_eq),
    'if': make_builtin('if', ['cond', 'then', 'else'], builtin_if),
    'cons': make_builtin('cons', ['head', 'list'], builtin_cons),
    'head': make_builtin('head', ['list'], builtin_head),
    'tail': make_builtin('tail', ['list'], builtin_tail),
}


def is_builtin(name: str) -> bool:
  return name in BUILTINS


def call_builtin(name: str, args: Sequence[Dict], env: Dict, context: Dict,
                 evaluate: Evaluate) -> Tuple[Dict, Dict]:
  """Transfer control to the named builtin, which evaluates its own arguments"""
  return BUILTINS[name]['func'](args, env, context, evaluate)
