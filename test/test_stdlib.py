"""
Tests for runtime values, the printer and the primitive procedures
"""

import pytest
from stdlib import (
  BUILTIN_PRIMITIVES,
  apply_primitive,
  make_number,
  make_boolean,
  make_symbol,
  make_pair,
  make_list,
  make_empty_list,
  make_unspecified,
  list_to_python,
  scheme_show,
)
from error_handling import ArityError, TypeMismatch


def call(name, *args):
  return apply_primitive(BUILTIN_PRIMITIVES[name], list(args))


def nums(*values):
  return [make_number(v) for v in values]


class TestPrinter:
  """Test external representations"""

  def test_atoms(self):
    assert scheme_show(make_number(120)) == "120"
    assert scheme_show(make_boolean(True)) == "#t"
    assert scheme_show(make_boolean(False)) == "#f"
    assert scheme_show(make_symbol("dummy")) == "dummy"
    assert scheme_show(make_unspecified()) == "#<void>"

  def test_lists(self):
    assert scheme_show(make_empty_list()) == "()"
    assert scheme_show(make_list(nums(2, 3, 4))) == "(2 3 4)"
    nested = make_list([make_number(1), make_list(nums(2, 3))])
    assert scheme_show(nested) == "(1 (2 3))"

  def test_dotted_pair(self):
    assert scheme_show(make_pair(make_number(1), make_number(2))) == "(1 . 2)"
    improper = make_pair(make_number(1), make_pair(make_number(2), make_number(3)))
    assert scheme_show(improper) == "(1 2 . 3)"

  def test_procedures(self):
    assert scheme_show(BUILTIN_PRIMITIVES["+"]) == "#<primitive:+>"

  def test_list_to_python(self):
    assert list_to_python(make_list(nums(1, 2))) == nums(1, 2)
    assert list_to_python(make_empty_list()) == []


class TestArithmetic:
  """Test +, -, *, add1, sub1"""

  def test_add(self):
    assert call("+", *nums(1, 2, 3))['value'] == 6
    assert call("+")['value'] == 0

  def test_subtract(self):
    assert call("-", *nums(5, 1))['value'] == 4
    assert call("-", *nums(10, 1, 2))['value'] == 7

  def test_negate(self):
    assert call("-", make_number(3))['value'] == -3

  def test_multiply(self):
    assert call("*", *nums(5, 24))['value'] == 120
    assert call("*")['value'] == 1

  def test_add1_sub1(self):
    assert call("add1", make_number(1))['value'] == 2
    assert call("sub1", make_number(1))['value'] == 0

  def test_big_numbers_do_not_overflow(self):
    assert call("*", *nums(2 ** 64, 2 ** 64))['value'] == 2 ** 128

  @pytest.mark.parametrize("name", ["+", "-", "*"])
  def test_non_number_operand(self, name):
    with pytest.raises(TypeMismatch) as excinfo:
      call(name, make_number(1), make_boolean(True))
    assert excinfo.value.operation == name
    assert excinfo.value.expected == "number?"
    assert excinfo.value.actual == "#t"

  def test_add1_type_error(self):
    with pytest.raises(TypeMismatch):
      call("add1", make_empty_list())

  def test_subtract_needs_an_argument(self):
    with pytest.raises(ArityError) as excinfo:
      call("-")
    assert excinfo.value.expected == "at least 1"
    assert excinfo.value.got == 0


class TestComparison:
  """Test =, <, >, zero?, not"""

  def test_numeric_equality(self):
    assert call("=", *nums(0, 0))['value'] is True
    assert call("=", *nums(1, 0))['value'] is False
    assert call("=", *nums(2, 2, 2))['value'] is True

  def test_equality_result_is_boolean(self):
    assert call("=", *nums(0, 0))['type'] == "Bool"

  def test_ordering(self):
    assert call("<", *nums(1, 2, 3))['value'] is True
    assert call("<", *nums(1, 3, 2))['value'] is False
    assert call(">", *nums(3, 2))['value'] is True

  def test_equality_rejects_non_numbers(self):
    with pytest.raises(TypeMismatch):
      call("=", make_symbol("a"), make_symbol("a"))

  def test_zero(self):
    assert call("zero?", make_number(0))['value'] is True
    assert call("zero?", make_number(5))['value'] is False

  def test_not(self):
    assert call("not", make_boolean(False))['value'] is True
    assert call("not", make_number(0))['value'] is False


class TestLists:
  """Test null?, pair?, cons, car, cdr, list"""

  def test_null(self):
    assert call("null?", make_empty_list())['value'] is True
    assert call("null?", make_list(nums(1)))['value'] is False
    assert call("null?", make_number(0))['value'] is False

  def test_pair(self):
    assert call("pair?", make_list(nums(1)))['value'] is True
    assert call("pair?", make_empty_list())['value'] is False

  def test_cons_car_cdr(self):
    lst = call("cons", make_number(1), make_list(nums(2, 3)))
    assert scheme_show(lst) == "(1 2 3)"
    assert call("car", lst) == make_number(1)
    assert scheme_show(call("cdr", lst)) == "(2 3)"

  def test_list(self):
    assert scheme_show(call("list", *nums(1, 2))) == "(1 2)"
    assert scheme_show(call("list")) == "()"

  @pytest.mark.parametrize("name", ["car", "cdr"])
  def test_car_cdr_of_non_pair(self, name):
    with pytest.raises(TypeMismatch) as excinfo:
      call(name, make_empty_list())
    assert excinfo.value.expected == "pair?"
    assert excinfo.value.actual == "()"
    assert str(excinfo.value) == f"{name}: contract violation; expected: pair?, given: ()"

  def test_cons_arity(self):
    with pytest.raises(ArityError) as excinfo:
      call("cons", make_number(1))
    assert str(excinfo.value) == "cons: arity mismatch; expected: 2, given: 1"
