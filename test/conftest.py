"""
Test configuration for the Y-combinator evaluator tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import create_parser
from semantics import create_analyzer
from interpreter import eval_program


@pytest.fixture
def evaluate():
  """Evaluate a program in a fresh top-level environment, return the last value"""
  def run(source: str):
    cst_nodes = create_parser().parse_string(source)
    ast_nodes = create_analyzer().analyze(cst_nodes)
    value, _ = eval_program(ast_nodes)
    return value
  return run
