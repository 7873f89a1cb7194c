"""
Demo programs for Forklet
Programs are built directly as expression trees; there is no parser
"""

from typing import Callable, Dict, List, Optional, Sequence

from expressions import (
  make_call,
  make_if,
  make_let,
  make_literal,
  make_spawn,
  make_sync,
  make_variable
)
from interpreter import Interpreter
from values import make_function, make_integer, make_vector


def var(name: str) -> Dict:
  return make_variable(name)


def lit_int(n: int) -> Dict:
  return make_literal(make_integer(n))


def lit_vector(numbers: Sequence[int]) -> Dict:
  return make_literal(make_vector(make_integer(n) for n in numbers))


EMPTY_VECTOR = make_literal(make_vector())

# Stand-in for the unused type parameters A and B of pmap
TYPE_PLACEHOLDER = make_literal(make_function("", [], lit_int(0)))


# ============================================================================
# FUNCTION DEFINITIONS
# ============================================================================

def define_double(interpreter: Interpreter) -> Dict:
  """double x = + x x"""
  return interpreter.define_function(
      "double", ["x"], make_call("+", var("x"), var("x")))


def define_recursive_pmap(interpreter: Interpreter) -> Dict:
  """recursive_pmap A B n f v

  Maps f over the first n elements of v, recursing on the tail.
  """
  body = make_call(
      "if",
      make_call("=", var("n"), lit_int(0)),
      EMPTY_VECTOR,
      make_call(
          "cons",
          make_call("f", make_call("head", var("v"))),
          make_call(
              "recursive_pmap",
              var("A"),
              var("B"),
              make_call("-", var("n"), lit_int(1)),
              var("f"),
              make_call("tail", var("v")))))
  return interpreter.define_function(
      "recursive_pmap", ["A", "B", "n", "f", "v"], body)


def define_pmap(interpreter: Interpreter) -> Dict:
  body = make_call("recursive_pmap", var("A"), var("B"), var("n"), var("f"), var("v"))
  return interpreter.define_function("pmap", ["A", "B", "n", "f", "v"], body)


def define_spawn_map(interpreter: Interpreter) -> Dict:
  """spawn_map f v

  Spawns f on every element before syncing any of them, so the calls
  run as concurrent tasks; results keep the order of v.
  """
  body = make_if(
      make_call("=", var("v"), EMPTY_VECTOR),
      EMPTY_VECTOR,
      make_let(
          "pending",
          make_spawn(make_call("f", make_call("head", var("v")))),
          make_let(
              "rest",
              make_call("spawn_map", var("f"), make_call("tail", var("v"))),
              make_call("cons", make_sync(var("pending")), var("rest")))))
  return interpreter.define_function("spawn_map", ["f", "v"], body)


def install_demo_functions(interpreter: Interpreter) -> Interpreter:
  define_double(interpreter)
  define_recursive_pmap(interpreter)
  define_pmap(interpreter)
  define_spawn_map(interpreter)
  return interpreter


# ============================================================================
# DEMO PROGRAMS
# ============================================================================

def double_program(numbers: Sequence[int]) -> Dict:
  """double applied to the first number"""
  return make_call("double", lit_int(numbers[0]))


def pmap_program(numbers: Sequence[int]) -> Dict:
  """pmap double over the numbers, sequentially"""
  return make_call(
      "pmap",
      TYPE_PLACEHOLDER,
      TYPE_PLACEHOLDER,
      lit_int(len(numbers)),
      var("double"),
      lit_vector(numbers))


def spawn_map_program(numbers: Sequence[int]) -> Dict:
  """double every number in its own spawned task"""
  return make_call("spawn_map", var("double"), lit_vector(numbers))


DEMOS: Dict[str, Callable[[Sequence[int]], Dict]] = {
    'double': double_program,
    'pmap': pmap_program,
    'spawn-map': spawn_map_program,
}

DEFAULT_NUMBERS: List[int] = [1, 2, 3, 4]


def run_demo(name: str, numbers: Sequence[int] = DEFAULT_NUMBERS,
             interpreter: Optional[Interpreter] = None) -> Dict:
  """Evaluate a named demo and return its value"""
  if name not in DEMOS:
    raise KeyError(f"Unknown demo: {name}")
  if not numbers:
    raise ValueError("demos need at least one number")
  if interpreter is None:
    interpreter = Interpreter()
  install_demo_functions(interpreter)
  return interpreter.eval(DEMOS[name](numbers))
