"""
Reader tests
Datums, spans, comments and malformed input
"""

import pytest
from parsing import SchemeGrammar, create_parser, pretty_print_cst, find_nodes_by_type, cst_to_dict
from error_handling import SchemeParseError


class TestAtoms:
  """Test atom parsing"""

  @pytest.fixture
  def parser(self):
    """Provide a fresh parser for each test"""
    return create_parser()

  def test_number(self, parser):
    node = parser.parse_expression("42")
    assert node.type == "NUMBER"
    assert node.value == 42

  def test_signed_numbers(self, parser):
    assert parser.parse_expression("-7").value == -7
    assert parser.parse_expression("+3").value == 3

  def test_booleans(self, parser):
    assert parser.parse_expression("#t").value is True
    assert parser.parse_expression("#f").value is False
    assert parser.parse_expression("#true").value is True
    assert parser.parse_expression("#false").value is False

  def test_operator_symbols(self, parser):
    """Arithmetic operators are plain identifiers"""
    for name in ["+", "-", "*", "="]:
      node = parser.parse_expression(name)
      assert node.type == "SYMBOL"
      assert node.value == name

  def test_punctuated_identifiers(self, parser):
    for name in ["null?", "set!", "add1", "self"]:
      node = parser.parse_expression(name)
      assert node.type == "SYMBOL"
      assert node.value == name


class TestLists:
  """Test compound datums"""

  @pytest.fixture
  def parser(self):
    return create_parser()

  def test_application(self, parser):
    node = parser.parse_expression("(fact 5)")
    assert node.type == "LIST"
    assert [child.type for child in node.children] == ["SYMBOL", "NUMBER"]

  def test_nested_lists(self, parser):
    node = parser.parse_expression("((i i) 5)")
    assert node.children[0].type == "LIST"
    assert [child.value for child in node.children[0].children] == ["i", "i"]

  def test_empty_list(self, parser):
    node = parser.parse_expression("()")
    assert node.type == "LIST"
    assert node.children == []

  def test_brackets(self, parser):
    node = parser.parse_expression("(let ([x 1]) x)")
    binding = node.children[1].children[0]
    assert binding.type == "LIST"
    assert binding.children[0].value == "x"

  def test_quote(self, parser):
    node = parser.parse_expression("'(1 2 3)")
    assert node.type == "QUOTE"
    assert node.children[0].type == "LIST"
    assert len(node.children[0].children) == 3

  def test_str_round_trips_shape(self, parser):
    text = "(lambda (x) ((self self) x))"
    assert str(parser.parse_expression(text)) == text


class TestPrograms:
  """Test whole programs"""

  @pytest.fixture
  def parser(self):
    return create_parser()

  def test_multiple_forms(self, parser):
    nodes = parser.parse_string("(define x 1)\n(add1 x)")
    assert len(nodes) == 2

  def test_comments_are_ignored(self, parser):
    source = """
    ; the factorial
    (fact 5) ; => 120
    """
    nodes = parser.parse_string(source)
    assert len(nodes) == 1
    assert str(nodes[0]) == "(fact 5)"

  def test_empty_program(self, parser):
    assert parser.parse_string("") == []
    assert parser.parse_string("; only a comment") == []

  def test_spans_track_lines(self, parser):
    nodes = parser.parse_string("(define x 1)\n\n(add1 x)", "prog.scm")
    assert nodes[0].span.start_line == 1
    assert nodes[1].span.start_line == 3
    assert nodes[1].span.filename == "prog.scm"
    assert nodes[1].span.text == "(add1 x)"

  def test_parse_file(self, parser, tmp_path):
    path = tmp_path / "fact.scm"
    path.write_text("(define (f n) n)\n(f 1)\n")
    nodes = parser.parse_file(str(path))
    assert len(nodes) == 2

  def test_missing_file(self, parser, tmp_path):
    with pytest.raises(SchemeParseError):
      parser.parse_file(str(tmp_path / "missing.scm"))


class TestParseErrors:
  """Test error handling and reporting"""

  @pytest.fixture
  def parser(self):
    return create_parser()

  def test_unclosed_parenthesis(self, parser):
    with pytest.raises(SchemeParseError) as excinfo:
      parser.parse_string("(fact 5")
    error = excinfo.value
    assert error.line == 1
    assert any("unclosed" in suggestion for suggestion in error.suggestions)

  def test_extra_closing_parenthesis(self, parser):
    with pytest.raises(SchemeParseError) as excinfo:
      parser.parse_string("(fact 5))")
    assert any("extra ')'" in suggestion for suggestion in excinfo.value.suggestions)

  def test_error_reports_line_of_failure(self, parser):
    with pytest.raises(SchemeParseError) as excinfo:
      parser.parse_string("(define x 1)\n)")
    assert excinfo.value.line == 2
    assert "Error here" in excinfo.value.context

  def test_expression_requires_single_datum(self, parser):
    with pytest.raises(SchemeParseError):
      parser.parse_expression("1 2")

  def test_unknown_hash_syntax(self, parser):
    with pytest.raises(SchemeParseError):
      parser.parse_expression("#x")

  def test_error_message_names_file(self, parser):
    with pytest.raises(SchemeParseError) as excinfo:
      parser.parse_string("(", "broken.scm")
    assert str(excinfo.value).startswith("broken.scm: Parse error at line 1")


class TestCSTUtilities:
  """Test CST helpers"""

  @pytest.fixture
  def grammar(self):
    return SchemeGrammar()

  def test_find_nodes_by_type(self, grammar):
    node = grammar.parse_expression("(* n (f (- n 1)))")
    numbers = find_nodes_by_type(node, "NUMBER")
    assert [n.value for n in numbers] == [1]

  def test_pretty_print(self, grammar):
    text = pretty_print_cst(grammar.parse_expression("(add1 1)"))
    assert text.splitlines() == ["LIST", "  SYMBOL('add1')", "  NUMBER(1)"]

  def test_cst_to_dict(self, grammar):
    data = cst_to_dict(grammar.parse_expression("(f 1)"))
    assert data["type"] == "LIST"
    assert data["span"]["start_col"] == 1
    assert [child["value"] for child in data["children"]] == ["f", 1]
