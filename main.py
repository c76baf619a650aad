"""
Y-combinator derivation - Main Entry Point
Runs the worked examples, or a Scheme file, through the evaluator
"""

import sys
import argparse
from pathlib import Path

from parsing import create_parser, pretty_print_cst
from semantics import create_analyzer, SchemeSemanticsError
from interpreter import create_interpreter
from error_handling import SchemeParseError, SchemeRuntimeError
from stdlib import scheme_show
from snippets import EXAMPLES, example_names
from driver import render_report, check_examples


VERSION = "0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Evaluate the Y-combinator derivation, one snippet at a time',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                          # Report every worked example
  %(prog)s -e y-map -e y-sum        # Report selected examples
  %(prog)s --category derivation    # Report one category
  %(prog)s --check                  # Compare every example with its expected output
  %(prog)s program.scm              # Run a Scheme file
  %(prog)s --parse program.scm      # Parse file and show CST
  %(prog)s --debug -e naive-let     # Trace evaluation
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Scheme source file to execute'
  )

  parser.add_argument(
      '-e', '--example',
      action='append',
      metavar='NAME',
      help='Run a named example (repeatable)'
  )

  parser.add_argument(
      '--category',
      choices=['naive', 'success', 'derivation', 'y-combinator'],
      help='Run every example of one category'
  )

  parser.add_argument(
      '--list',
      action='store_true',
      help='List the registered examples'
  )

  parser.add_argument(
      '--check',
      action='store_true',
      help='Check example outcomes against their expected text'
  )

  parser.add_argument(
      '--show-source',
      action='store_true',
      help='Print each example\'s source above its result'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show CST (for debugging)'
  )

  parser.add_argument(
      '--analyze',
      action='store_true',
      help='Parse and analyze file, show AST node types (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'%(prog)s {VERSION}'
  )

  return parser


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Scheme file and show the CST"""
  parser = create_parser(debug)
  cst_nodes = parser.parse_file(script_path)

  print(f"Parsed {len(cst_nodes)} top-level forms:")
  print("=" * 50)
  for i, node in enumerate(cst_nodes, 1):
    print(f"\nForm {i}:")
    print(pretty_print_cst(node))


def analyze_file(script_path: str, debug: bool = False) -> None:
  """Parse and analyze a Scheme file and show the AST node types"""
  cst_nodes = create_parser(debug).parse_file(script_path)
  ast_nodes = create_analyzer(debug).analyze(cst_nodes)

  print(f"Analyzed {len(ast_nodes)} top-level forms:")
  print("=" * 50)
  for i, (cst_node, ast_node) in enumerate(zip(cst_nodes, ast_nodes), 1):
    print(f"\nForm {i}: {ast_node['type']}")
    print(f"  Source: {cst_node}")


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Scheme file, printing the value of each top-level form"""
  cst_nodes = create_parser(debug).parse_file(script_path)
  ast_nodes = create_analyzer(debug).analyze(cst_nodes)
  interpreter = create_interpreter(debug)

  for ast_node in ast_nodes:
    value = interpreter.interpret_program([ast_node])
    if value['type'] != "Unspecified":
      print(scheme_show(value))


def run_file_command(args: argparse.Namespace) -> int:
  """Dispatch --parse / --analyze / run for a script, reporting errors"""
  script_path = args.script
  if not Path(script_path).exists():
    print(f"Error: Script file '{script_path}' does not exist")
    return 1

  try:
    if args.parse:
      parse_file(script_path, args.debug)
    elif args.analyze:
      analyze_file(script_path, args.debug)
    else:
      run_script_file(script_path, args.debug)
  except SchemeParseError as e:
    print(str(e))
    return 1
  except SchemeSemanticsError as e:
    print(f"{script_path}: {e}")
    return 1
  except SchemeRuntimeError as e:
    print(f"{e.message}")
    return 1
  except RecursionError:
    print(f"{script_path}: recursion depth exceeded")
    return 1
  return 0


def select_examples(args: argparse.Namespace) -> list:
  """Example names chosen on the command line, in registry order"""
  if args.example:
    unknown = [name for name in args.example if name not in EXAMPLES]
    if unknown:
      raise KeyError(", ".join(unknown))
    return args.example
  if args.category:
    return example_names(args.category)
  return example_names()


def list_examples() -> None:
  width = max(len(name) for name in EXAMPLES)
  for name, example in EXAMPLES.items():
    print(f"{name:<{width}}  [{example['category']}] {example['description']}")


def run_checks(names: list, debug: bool = False) -> int:
  """Print one line per example; exit status 1 on any mismatch"""
  results = check_examples(names, debug)
  failures = [result for result in results if not result['passed']]

  for result in results:
    mark = "ok  " if result['passed'] else "FAIL"
    print(f"{mark} {result['name']}: {result['actual']}")
    if not result['passed']:
      print(f"     expected: {result['expected']}")

  print(f"\n{len(results) - len(failures)}/{len(results)} examples match")
  return 1 if failures else 0


def main(argv=None) -> int:
  """Main entry point"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.script:
    return run_file_command(args)

  if args.list:
    list_examples()
    return 0

  try:
    names = select_examples(args)
  except KeyError as e:
    print(f"Error: unknown example(s): {e.args[0]}")
    print("  Hint: use --list to see the registered examples")
    return 1

  if args.check:
    return run_checks(names, args.debug)

  print(render_report(names, show_source=args.show_source, debug=args.debug))
  return 0


if __name__ == "__main__":
  sys.exit(main())
