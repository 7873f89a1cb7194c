"""
Utilities module for the Forklet interpreter
Contains common helper functions to reduce code duplication
"""

from typing import Any, Callable, Dict, Sequence

from error_handling import ArityMismatchError, ForkletTypeError
from values import INTEGER, make_value, value_type


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(
  func_name: str,
  param_name: str,
  expected: str,
  actual: Dict
) -> ForkletTypeError:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    param_name: Parameter name
    expected: Expected type
    actual: Actual value dict

  Returns:
    ForkletTypeError with formatted message
  """
  actual_type = value_type(actual)
  return ForkletTypeError(
    f"{func_name} requires {expected} for {param_name}, got {actual_type}",
    function=func_name,
    expected=expected,
    got=actual_type
  )


def arity_error(func_name: str, expected: int, got: int) -> ArityMismatchError:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    expected: Expected number of arguments
    got: Actual number of arguments

  Returns:
    ArityMismatchError carrying both counts
  """
  return ArityMismatchError(func_name, expected, got)


# ==================== VALIDATION UTILITIES ====================

def validate_arity(func_name: str, args: Sequence[Any], expected: int) -> None:
  """
  Check an argument list length before anything is evaluated

  Raises:
    ArityMismatchError if the counts differ
  """
  if len(args) != expected:
    raise arity_error(func_name, expected, len(args))


def expect_type(func_name: str, param_name: str, value: Dict, expected: str) -> Dict:
  """
  Return value unchanged if it has the expected type tag

  Raises:
    ForkletTypeError if validation fails
  """
  if value_type(value) != expected:
    raise type_mismatch_error(func_name, param_name, expected, value)
  return value


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(
  op: Callable[[int, int], int],
  op_name: str
) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for binary integer arithmetic operations

  Args:
    op: Python operator function (e.g., operator.add)
    op_name: Name for error messages

  Returns:
    Function that performs the arithmetic operation on two Integer values

  Examples:
    add = binary_arithmetic_op(operator.add, "+")
    result = add({"type": "Integer", "value": 1}, {"type": "Integer", "value": 2})
  """
  def arithmetic(x: Dict, y: Dict) -> Dict:
    expect_type(op_name, "argument 1", x, INTEGER)
    expect_type(op_name, "argument 2", y, INTEGER)
    return make_value(op(x['value'], y['value']), INTEGER)

  return arithmetic
