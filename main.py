"""
Forklet - Main Entry Point
Runs the bundled demo programs and prints their results
"""

import sys
import argparse
from typing import List, Optional

from demos import DEFAULT_NUMBERS, DEMOS, run_demo
from error_handling import ForkletRuntimeError
from interpreter import create_interpreter
from values import show_value


VERSION = 'Forklet v0.1.0'


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='forklet',
      description='Forklet - expression evaluator with spawn/sync futures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                           # Run the pmap demo over 1 2 3 4
  %(prog)s --demo spawn-map          # Same map, one spawned task per element
  %(prog)s --demo double --values 21 # double 21
  %(prog)s --list                    # List the demos
  %(prog)s --debug --demo spawn-map  # Trace evaluation
        """
  )

  parser.add_argument(
      '--demo',
      choices=sorted(DEMOS),
      default='pmap',
      help='Demo program to run (default: pmap)'
  )

  parser.add_argument(
      '--values',
      nargs='+',
      type=int,
      default=list(DEFAULT_NUMBERS),
      metavar='N',
      help='Integers fed to the demo (default: 1 2 3 4)'
  )

  parser.add_argument(
      '--list',
      action='store_true',
      help='List the available demos and exit'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for evaluation and spawned tasks'
  )

  parser.add_argument(
      '--scoped-let',
      action='store_true',
      help='Discard let bindings once their body has been evaluated'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def list_demos() -> None:
  print("Available demos:")
  for name, program in sorted(DEMOS.items()):
    summary = (program.__doc__ or '').strip().splitlines()
    print(f"  {name:<10} {summary[0] if summary else ''}")


def run(demo: str, values: List[int], debug: bool = False, scoped_let: bool = False) -> int:
  """Run a demo, print its result and return the exit status"""
  interpreter = create_interpreter(debug=debug, scoped_let=scoped_let)

  if debug:
    print(f"Running demo '{demo}' with values {values}")

  try:
    result = run_demo(demo, values, interpreter)
  except ForkletRuntimeError as e:
    print(f"\n{'='*70}")
    print(f"Runtime Error in demo '{demo}'")
    print(f"{'='*70}")
    print(f"\n{e}")
    print(f"\n{'='*70}\n")
    return 1

  print(f"Result: {show_value(result)}")
  if result['type'] == 'Vector':
    print(f"Length: {len(result['value'])}")
  return 0


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Forklet"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.list:
    list_demos()
    return 0

  return run(args.demo, args.values, debug=args.debug, scoped_let=args.scoped_let)


if __name__ == "__main__":
  sys.exit(main())
