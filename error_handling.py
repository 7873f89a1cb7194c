"""
Runtime error taxonomy for Forklet
Errors are built as plain dictionaries and formatted by pure functions;
the exception classes exist so failures can propagate through evaluation
"""

from typing import Any, Dict, Optional


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_runtime_error(
    kind: str,
    message: str,
    function: Optional[str] = None,
    expected: Optional[Any] = None,
    got: Optional[Any] = None,
    task: Optional[str] = None
) -> Dict:
  """Create an immutable runtime error structure"""
  return {
      'kind': kind,
      'message': message,
      'function': function,
      'expected': expected,
      'got': got,
      'task': task
  }


def format_runtime_error(error: Dict) -> str:
  """Format runtime error as string"""
  error_msg = f"{error['kind']}: {error['message']}"

  if error['function']:
    error_msg += f"\n  In: {error['function']}"

  if error['expected'] is not None:
    error_msg += f"\n  Expected: {error['expected']}"

  if error['got'] is not None:
    error_msg += f"\n  Got: {error['got']}"

  if error['task']:
    error_msg += f"\n  Task: {error['task']}"

  return error_msg


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class ForkletRuntimeError(Exception):
  """Base class for every failure raised while evaluating an expression"""

  kind = "RuntimeError"

  def __init__(self, message: str, function: Optional[str] = None,
               expected: Optional[Any] = None, got: Optional[Any] = None,
               task: Optional[str] = None):
    self.message = message
    self.details = make_runtime_error(
        self.kind, message, function, expected, got, task)
    super().__init__(message)

  def __str__(self) -> str:
    return format_runtime_error(self.details)


class UndefinedVariableError(ForkletRuntimeError):
  """Variable lookup found no binding"""

  kind = "UndefinedVariable"

  def __init__(self, name: str):
    self.name = name
    super().__init__(f"Undefined variable: {name}")


class NotCallableError(ForkletRuntimeError):
  """Callee of an application did not evaluate to a Function"""

  kind = "NotCallable"

  def __init__(self, value_type: str):
    self.value_type = value_type
    super().__init__("Not a function", expected="Function", got=value_type)


class ArityMismatchError(ForkletRuntimeError):
  """Argument count differs from the function's parameter count"""

  kind = "ArityMismatch"

  def __init__(self, function: str, expected: int, got: int):
    self.function = function
    self.expected = expected
    self.got = got
    super().__init__(
        f"{function} takes {expected} argument{'' if expected == 1 else 's'}, got {got}",
        function=function, expected=expected, got=got)


class ForkletTypeError(ForkletRuntimeError):
  """Operand of the wrong value type"""

  kind = "TypeError"

  def __init__(self, reason: str, function: Optional[str] = None,
               expected: Optional[str] = None, got: Optional[str] = None):
    self.reason = reason
    super().__init__(reason, function=function, expected=expected, got=got)


class EmptyCollectionError(ForkletRuntimeError):
  """head or tail applied to an empty Vector"""

  kind = "EmptyCollection"

  def __init__(self, operation: str):
    self.operation = operation
    super().__init__("empty vector", function=operation)


class FutureAlreadyConsumedError(ForkletRuntimeError):
  """sync applied to a Future that an earlier sync already drained"""

  kind = "FutureAlreadyConsumed"

  def __init__(self, task_id: Optional[str] = None):
    self.task_id = task_id
    super().__init__("future has already been synced", function="sync",
                     task=task_id)


class RecursionDepthError(ForkletRuntimeError):
  """Evaluation nested deeper than the host interpreter's recursion limit"""

  kind = "RecursionDepth"

  def __init__(self, limit: int, task: Optional[str] = None):
    self.limit = limit
    super().__init__("expression nests too deeply to evaluate",
                     expected=f"at most {limit} nested Python frames", task=task)
