"""
Forklet Interpreter - Pure Functional Style
Evaluation threads an immutable environment through every call and returns
(value, environment) pairs; spawned tasks run on actor threads at the boundary
"""

from typing import Dict, Optional, Sequence, Tuple
import sys

from concurrency import new_task_id, spawn_task, sync_future
from error_handling import (
  ForkletTypeError,
  NotCallableError,
  RecursionDepthError,
  UndefinedVariableError
)
from expressions import (
  APPLICATION,
  IF,
  LET,
  LITERAL,
  SPAWN,
  SYNC,
  VARIABLE,
  make_variable
)
from stdlib import BUILTINS, call_builtin, eval_args, is_builtin
from utilities import validate_arity
from values import BOOLEAN, FUNCTION, make_function, make_future, value_type


# ============================================================================
# EXECUTION CONTEXT
# ============================================================================

def make_execution_context(debug: bool = False, scoped_let: bool = False,
                           task: Optional[str] = None) -> Dict:
  """Create an execution context carrying interpreter settings

  scoped_let discards a Let binding once its body has been evaluated;
  by default the binding stays in the environment for later siblings.
  """
  return {
      'debug': debug,
      'scoped_let': scoped_let,
      'task': task
  }


def child_context(context: Dict, task_id: str) -> Dict:
  """Context for a spawned task: same settings, labelled with the task"""
  return {**context, 'task': task_id}


def trace(context: Dict, message: str) -> None:
  if context['debug']:
    prefix = f"[task {context['task']}] " if context['task'] else ""
    print(f"{prefix}{message}")


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Dict] = None) -> Dict:
  """Create an immutable runtime environment frame"""
  return {
      'parent': parent,
      'bindings': bindings or {}
  }


def env_extend(env: Dict, bindings: Dict) -> Dict:
  """Return new environment with bindings layered over env"""
  return make_runtime_env(env, dict(bindings))


def env_bind_value(env: Dict, name: str, value: Dict) -> Dict:
  """Return new environment with name bound to value"""
  return env_extend(env, {name: value})


def env_lookup_value(env: Dict, name: str) -> Optional[Dict]:
  """Look up a value in the environment chain"""
  while env is not None:
    if name in env['bindings']:
      return env['bindings'][name]
    env = env['parent']
  return None


def env_flatten(env: Dict) -> Dict:
  """Collapse the chain into a single dict; inner frames shadow outer ones"""
  frames = []
  while env is not None:
    frames.append(env['bindings'])
    env = env['parent']
  flat = {}
  for bindings in reversed(frames):
    flat.update(bindings)
  return flat


def create_builtin_runtime_env() -> Dict:
  """Create runtime environment with builtin names bound to placeholder functions

  The placeholder body is never evaluated; application dispatches builtins by name.
  """
  return make_runtime_env(bindings={
      name: make_function(name, builtin['params'], make_variable(builtin['params'][0]))
      for name, builtin in BUILTINS.items()
  })


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_expr(expr: Dict, env: Dict, context: Optional[Dict] = None) -> Tuple[Dict, Dict]:
  """
  Evaluate an expression node and return (result_value, updated_environment).
  The environment is threaded through evaluation; nothing is mutated.
  """
  if context is None:
    context = make_execution_context()

  node_type = expr['type']
  trace(context, f"Evaluating: {node_type}")

  if node_type == LITERAL:
    return expr['value'], env
  elif node_type == VARIABLE:
    return eval_variable(expr, env, context)
  elif node_type == APPLICATION:
    return eval_application(expr, env, context)
  elif node_type == LET:
    return eval_let(expr, env, context)
  elif node_type == IF:
    return eval_if(expr, env, context)
  elif node_type == SPAWN:
    return eval_spawn(expr, env, context)
  elif node_type == SYNC:
    return eval_sync(expr, env, context)
  else:
    raise ValueError(f"Unknown node type: {node_type}")


def eval_variable(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  """Evaluate variable by looking up in environment"""
  name = expr['value']
  value = env_lookup_value(env, name)

  if value is None:
    raise UndefinedVariableError(name)

  return value, env


def eval_let(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  """Bind name to the value, then evaluate the body with that binding"""
  node = expr['value']
  value, env = eval_expr(node['value'], env, context)
  body_env = env_bind_value(env, node['name'], value)
  result, body_env = eval_expr(node['body'], body_env, context)

  if context['scoped_let']:
    return result, env
  return result, body_env


def eval_if(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  node = expr['value']
  condition, env = eval_expr(node['condition'], env, context)

  if value_type(condition) != BOOLEAN:
    raise ForkletTypeError("condition must be boolean", expected=BOOLEAN,
                           got=value_type(condition))

  branch = node['then'] if condition['value'] else node['else']
  return eval_expr(branch, env, context)


def eval_application(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  """Evaluate function application"""
  node = expr['value']
  func_val, env = eval_expr(node['function'], env, context)

  if value_type(func_val) != FUNCTION:
    raise NotCallableError(value_type(func_val))

  func = func_val['value']
  args = node['args']

  if is_builtin(func['name']):
    trace(context, f"Builtin: {func['name']}")
    return call_builtin(func['name'], args, env, context, eval_expr)

  return apply_function(func, args, env, context)


def apply_function(func: Dict, args: Sequence[Dict], env: Dict,
                   context: Dict) -> Tuple[Dict, Dict]:
  """Apply a user function

  Arguments are evaluated in the caller's environment; the body sees a
  snapshot of that environment, taken before the arguments were evaluated,
  extended with the parameter bindings. Free variables in the body therefore
  resolve against the caller, not the place the function was written.
  """
  validate_arity(func['name'] or '<anonymous>', args, len(func['params']))

  arg_values, caller_env = eval_args(args, env, context, eval_expr)
  call_env = env_extend(env, dict(zip(func['params'], arg_values)))

  trace(context, f"Calling: {func['name']}")
  result, _ = eval_expr(func['body'], call_env, context)
  return result, caller_env


def eval_spawn(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  """Start the child expression against a snapshot and return its Future at once"""
  # Frames are immutable, so the current env is already a snapshot
  snapshot = env
  child_expr = expr['value']
  task_id = new_task_id()
  task_context = child_context(context, task_id)

  def work():
    value, _ = eval_expr(child_expr, snapshot, task_context)
    return value

  cell = spawn_task(work, debug=context['debug'], task_id=task_id)
  return make_future(cell), env


def eval_sync(expr: Dict, env: Dict, context: Dict) -> Tuple[Dict, Dict]:
  """Block until the Future's task has committed, then return its value"""
  future, env = eval_expr(expr['value'], env, context)
  return sync_future(future), env


# ============================================================================
# INTERPRETER
# ============================================================================

# Each user-level call nests roughly a dozen Python frames
EVAL_RECURSION_LIMIT = 10000


def ensure_recursion_limit(limit: int = EVAL_RECURSION_LIMIT) -> None:
  """Raise the host recursion limit to at least limit; never lowers it"""
  if sys.getrecursionlimit() < limit:
    sys.setrecursionlimit(limit)


def compact_env(env: Dict) -> Dict:
  """Collapse a frame chain into a single root frame with the same bindings"""
  return make_runtime_env(bindings=env_flatten(env))


class Interpreter:
  """Owns one environment for its lifetime; top-level Let bindings persist in it"""

  def __init__(self, debug: bool = False, scoped_let: bool = False):
    self.context = make_execution_context(debug=debug, scoped_let=scoped_let)
    self.env = create_builtin_runtime_env()
    ensure_recursion_limit()

  def eval(self, expr: Dict) -> Dict:
    """Evaluate expr at top level; bindings it leaves behind are kept

    Python running out of stack depth surfaces as RecursionDepthError,
    whether it happened here or inside a synced task.
    """
    try:
      value, env = eval_expr(expr, self.env, self.context)
    except RecursionError as e:
      raise RecursionDepthError(sys.getrecursionlimit()) from e
    self.env = compact_env(env)
    return value

  def define(self, name: str, value: Dict) -> None:
    self.env = compact_env(env_bind_value(self.env, name, value))

  def define_function(self, name: str, params: Sequence[str], body: Dict) -> Dict:
    func = make_function(name, params, body)
    self.define(name, func)
    return func

  def lookup(self, name: str) -> Dict:
    value = env_lookup_value(self.env, name)
    if value is None:
      raise UndefinedVariableError(name)
    return value

  @property
  def bindings(self) -> Dict:
    return env_flatten(self.env)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False, scoped_let: bool = False) -> Interpreter:
  """Factory function returning an interpreter with builtins pre-bound"""
  return Interpreter(debug=debug, scoped_let=scoped_let)


def create_debug_interpreter() -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
