"""
Tests for the Forklet builtin primitives
"""

import pytest
from concurrency import FutureCell
from error_handling import (
  ArityMismatchError,
  EmptyCollectionError,
  ForkletTypeError
)
from expressions import make_call, make_literal, make_spawn, make_variable
from interpreter import create_interpreter
from values import (
  make_boolean,
  make_function,
  make_future,
  make_integer,
  make_vector,
  values_equal
)


def lit(n):
  return make_literal(make_integer(n))


def vec(*numbers):
  return make_vector(make_integer(n) for n in numbers)


TRUE = make_literal(make_boolean(True))
FALSE = make_literal(make_boolean(False))
NOPE = make_variable("nope")


@pytest.fixture
def interpreter():
  return create_interpreter()


class TestArithmetic:
  """Test + and -"""

  @pytest.mark.parametrize("a,b", [(0, 0), (2, 3), (-7, 4), (10**12, 10**12)])
  def test_add(self, interpreter, a, b):
    assert interpreter.eval(make_call("+", lit(a), lit(b))) == make_integer(a + b)

  @pytest.mark.parametrize("a,b", [(0, 0), (2, 3), (-7, 4), (5, -5)])
  def test_sub(self, interpreter, a, b):
    assert interpreter.eval(make_call("-", lit(a), lit(b))) == make_integer(a - b)

  @pytest.mark.parametrize("op", ["+", "-"])
  def test_rejects_non_integer(self, interpreter, op):
    with pytest.raises(ForkletTypeError):
      interpreter.eval(make_call(op, lit(1), TRUE))

  def test_rejects_vector(self, interpreter):
    with pytest.raises(ForkletTypeError):
      interpreter.eval(make_call("+", make_literal(vec(1)), lit(1)))


class TestEquality:
  """Test ="""

  def test_equal_integers(self, interpreter):
    assert interpreter.eval(make_call("=", lit(4), lit(4))) == make_boolean(True)

  def test_mixed_types(self, interpreter):
    assert interpreter.eval(make_call("=", lit(1), TRUE)) == make_boolean(False)

  def test_vectors(self, interpreter):
    expr = make_call("=", make_literal(vec(1, 2)), make_literal(vec(1, 2)))
    assert interpreter.eval(expr) == make_boolean(True)

  def test_futures_compare_unequal(self, interpreter):
    expr = make_call("=", make_spawn(lit(1)), make_spawn(lit(1)))
    assert interpreter.eval(expr) == make_boolean(False)

  def test_function_holding_a_future_is_not_equal_to_itself(self, interpreter):
    interpreter.define_function("f", [], make_literal(make_future(FutureCell())))
    result = interpreter.eval(make_call("=", make_variable("f"), make_variable("f")))
    assert result['value'] is False


class TestIf:
  """Test the if builtin"""

  def test_selects_branch(self, interpreter):
    assert interpreter.eval(make_call("if", TRUE, lit(1), lit(2))) == make_integer(1)
    assert interpreter.eval(make_call("if", FALSE, lit(1), lit(2))) == make_integer(2)

  def test_only_selected_branch_is_evaluated(self, interpreter):
    assert interpreter.eval(make_call("if", TRUE, lit(1), NOPE)) == make_integer(1)

  def test_two_arguments_is_arity_mismatch(self, interpreter):
    with pytest.raises(ArityMismatchError) as exc_info:
      interpreter.eval(make_call("if", TRUE, lit(1)))
    assert exc_info.value.expected == 3

  def test_non_boolean_condition(self, interpreter):
    with pytest.raises(ForkletTypeError):
      interpreter.eval(make_call("if", lit(1), lit(1), lit(2)))


class TestVectors:
  """Test cons, head and tail"""

  @pytest.mark.parametrize("numbers", [(), (1,), (3, 2, 1)])
  def test_cons_properties(self, interpreter, numbers):
    v = make_literal(vec(*numbers))
    consed = interpreter.eval(make_call("cons", lit(9), v))
    assert len(consed['value']) == len(numbers) + 1
    assert interpreter.eval(make_call("head", make_call("cons", lit(9), v))) == make_integer(9)
    assert values_equal(interpreter.eval(make_call("tail", make_call("cons", lit(9), v))),
                        vec(*numbers))

  def test_cons_leaves_original_untouched(self, interpreter):
    original = vec(1, 2)
    interpreter.eval(make_call("cons", lit(0), make_literal(original)))
    assert original == vec(1, 2)

  def test_cons_requires_vector(self, interpreter):
    with pytest.raises(ForkletTypeError):
      interpreter.eval(make_call("cons", lit(1), lit(2)))

  @pytest.mark.parametrize("op", ["head", "tail"])
  def test_empty_vector(self, interpreter, op):
    with pytest.raises(EmptyCollectionError) as exc_info:
      interpreter.eval(make_call(op, make_literal(vec())))
    assert exc_info.value.operation == op

  @pytest.mark.parametrize("op", ["head", "tail"])
  def test_non_vector(self, interpreter, op):
    with pytest.raises(ForkletTypeError):
      interpreter.eval(make_call(op, lit(1)))

  def test_tail_of_singleton(self, interpreter):
    assert interpreter.eval(make_call("tail", make_literal(vec(1)))) == vec()


class TestBuiltinArity:
  """Wrong argument counts fail before any argument is evaluated"""

  @pytest.mark.parametrize("name,count", [
      ("+", 1), ("-", 3), ("=", 0), ("if", 2), ("cons", 1), ("head", 2), ("tail", 0)
  ])
  def test_arity_mismatch(self, interpreter, name, count):
    with pytest.raises(ArityMismatchError):
      interpreter.eval(make_call(name, *[NOPE] * count))
