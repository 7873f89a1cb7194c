"""
Forklet runtime values
Pure functional style using immutable dictionaries
"""

from typing import Any, Dict, Iterable, Sequence


INTEGER = "Integer"
BOOLEAN = "Boolean"
VECTOR = "Vector"
FUNCTION = "Function"
FUTURE = "Future"

VALUE_TYPES = frozenset([INTEGER, BOOLEAN, VECTOR, FUNCTION, FUTURE])


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def make_value(value: Any, type_name: str) -> Dict:
  """Create an immutable runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def make_integer(n: int) -> Dict:
  if isinstance(n, bool) or not isinstance(n, int):
    raise ValueError(f"Integer value must be an int, got {type(n).__name__}")
  return make_value(n, INTEGER)


def make_boolean(b: bool) -> Dict:
  if not isinstance(b, bool):
    raise ValueError(f"Boolean value must be a bool, got {type(b).__name__}")
  return make_value(b, BOOLEAN)


def make_vector(elements: Iterable[Dict] = ()) -> Dict:
  """Create a Vector; elements are stored as a tuple so the value never changes"""
  return make_value(tuple(elements), VECTOR)


def make_function(name: str, params: Sequence[str], body: Dict) -> Dict:
  """Create a named, unevaluated procedure

  The number of params is the arity enforced at every application.
  """
  return make_value({
      'name': name,
      'params': tuple(params),
      'body': body
  }, FUNCTION)


def make_future(cell: Any) -> Dict:
  """Wrap a FutureCell shared between a spawning context and its task"""
  return make_value(cell, FUTURE)


# ============================================================================
# PREDICATES
# ============================================================================

def is_value_dict(val: Any) -> bool:
  """True if val is a dict with 'type' and 'value' keys"""
  return isinstance(val, dict) and 'type' in val and 'value' in val


def value_type(val: Dict) -> str:
  return val.get('type', 'Unknown') if isinstance(val, dict) else type(val).__name__


# ============================================================================
# EQUALITY
# ============================================================================

def values_equal(x: Dict, y: Dict) -> bool:
  """Structural equality

  Futures never compare equal, not even to themselves.
  """
  if x['type'] != y['type']:
    return False

  if x['type'] == FUTURE:
    return False

  if x['type'] == VECTOR:
    xs, ys = x['value'], y['value']
    if len(xs) != len(ys):
      return False
    return all(values_equal(a, b) for a, b in zip(xs, ys))

  if x['type'] == FUNCTION:
    fx, fy = x['value'], y['value']
    return (fx['name'] == fy['name']
            and fx['params'] == fy['params']
            and trees_equal(fx['body'], fy['body']))

  return x['value'] == y['value']


def trees_equal(x: Any, y: Any) -> bool:
  """Equality over expression trees; embedded runtime values use values_equal"""
  if isinstance(x, dict) and isinstance(y, dict):
    if x.get('type') in VALUE_TYPES and y.get('type') in VALUE_TYPES:
      return values_equal(x, y)
    if x.keys() != y.keys():
      return False
    return all(trees_equal(x[key], y[key]) for key in x)

  if isinstance(x, (tuple, list)) and isinstance(y, (tuple, list)):
    return len(x) == len(y) and all(trees_equal(a, b) for a, b in zip(x, y))

  return x == y


# ============================================================================
# DISPLAY
# ============================================================================

def show_value(value: Dict) -> str:
  """Convert value to string representation"""
  if value['type'] == INTEGER:
    return str(value['value'])
  elif value['type'] == BOOLEAN:
    return "true" if value['value'] else "false"
  elif value['type'] == VECTOR:
    return f"[{', '.join(show_value(elem) for elem in value['value'])}]"
  elif value['type'] == FUNCTION:
    func = value['value']
    return f"<function {func['name'] or 'anonymous'}/{len(func['params'])}>"
  elif value['type'] == FUTURE:
    return f"<future {value['value'].state}>"
  else:
    return f"<{value['type']}>"


def unwrap_value(value: Dict) -> Any:
  """Recursively unwrap value dicts to extract raw Python values"""
  if value['type'] == VECTOR:
    return [unwrap_value(elem) for elem in value['value']]
  elif value['type'] in (INTEGER, BOOLEAN):
    return value['value']
  else:
    return show_value(value)
