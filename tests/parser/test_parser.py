"""Tests for the Parser."""

import pytest

from mathexpr.core.errors import ParseError
from mathexpr.parser import (
    Comma,
    Function,
    Number,
    Operator,
    OperatorKind,
    Parenthesis,
    Parser,
    Variable,
    VariableMap,
)


class TestParserStructure:
    """Test the element sequences produced by parsing."""

    def test_flat_sequence(self, parser):
        """Test numbers and operators stay flat."""
        expression = parser.parse("1 + 2 * 3")
        assert list(expression.elements) == [
            Number(1),
            Operator(OperatorKind.ADD),
            Number(2),
            Operator(OperatorKind.MULTIPLY),
            Number(3),
        ]

    def test_parenthesis_owns_sub_expression(self, parser):
        """Test ( ) becomes one Parenthesis element."""
        expression = parser.parse("2 * (a + 1)")
        assert len(expression.elements) == 3
        group = expression.elements[2]
        assert isinstance(group, Parenthesis)
        assert list(group.expression.elements) == [
            Variable("a"),
            Operator(OperatorKind.ADD),
            Number(1),
        ]

    def test_nested_parentheses(self, parser):
        """Test groups nest without losing structure."""
        expression = parser.parse("((1))")
        outer = expression.elements[0]
        inner = outer.expression.elements[0]
        assert isinstance(inner, Parenthesis)
        assert list(inner.expression.elements) == [Number(1)]

    def test_function_arguments_split_on_commas(self, parser):
        """Test a call keeps one expression per argument."""
        expression = parser.parse("atan2(sqrt(25), 1 * 3)")
        call = expression.elements[0]
        assert isinstance(call, Function)
        assert call.name == "atan2"
        assert call.arity == 2
        assert isinstance(call.arguments[0].elements[0], Function)
        assert list(call.arguments[1].elements) == [
            Number(1),
            Operator(OperatorKind.MULTIPLY),
            Number(3),
        ]
        assert not any(isinstance(e, Comma) for arg in call.arguments for e in arg.elements)

    def test_zero_argument_call(self, parser):
        """Test empty parentheses after a name give a call with no arguments."""
        call = parser.parse("random()").elements[0]
        assert isinstance(call, Function)
        assert call.arguments == ()

    def test_whitespace_between_name_and_parenthesis(self, parser):
        """Test a name separated from ( by spaces is still a call."""
        call = parser.parse("sin (0)").elements[0]
        assert isinstance(call, Function)
        assert call.name == "sin"

    def test_sign_runs_are_kept(self, parser):
        """Test unary sign chains stay as consecutive operators."""
        expression = parser.parse("10 + -12")
        assert list(expression.elements) == [
            Number(10),
            Operator(OperatorKind.ADD),
            Operator(OperatorKind.SUBTRACT),
            Number(12),
        ]

    def test_leading_sign(self, parser):
        """Test + and - may open an expression."""
        assert parser.parse("-1").elements[0] == Operator(OperatorKind.SUBTRACT)
        assert parser.parse("+1").elements[0] == Operator(OperatorKind.ADD)

    def test_blank_input_is_empty_expression(self, parser):
        """Test blank text parses to an expression without elements."""
        assert parser.parse("   ").elements == ()


class TestImplicitMultiplication:
    """Test where the parser multiplies without an operator."""

    def test_number_variable(self, parser):
        """Test 2a."""
        assert list(parser.parse("2a").elements) == [
            Number(2),
            Operator(OperatorKind.MULTIPLY),
            Variable("a"),
        ]

    def test_two_variables(self, parser):
        """Test a b."""
        assert list(parser.parse("a b").elements) == [
            Variable("a"),
            Operator(OperatorKind.MULTIPLY),
            Variable("b"),
        ]

    def test_number_before_parenthesis(self, parser):
        """Test 2(3) inserts a multiplication."""
        elements = parser.parse("2(3)").elements
        assert elements[1] == Operator(OperatorKind.MULTIPLY)
        assert isinstance(elements[2], Parenthesis)

    def test_parenthesis_before_parenthesis(self, parser):
        """Test (1)(2) inserts a multiplication."""
        elements = parser.parse("(1)(2)").elements
        assert len(elements) == 3
        assert elements[1] == Operator(OperatorKind.MULTIPLY)

    def test_number_before_function(self, parser):
        """Test 2 sin(x) multiplies the call."""
        elements = parser.parse("2 sin(x)").elements
        assert elements[1] == Operator(OperatorKind.MULTIPLY)
        assert isinstance(elements[2], Function)

    def test_operator_before_parenthesis_adds_nothing(self, parser):
        """Test an explicit operator is not doubled."""
        assert len(parser.parse("2 * (3)").elements) == 3


class TestSharedVariables:
    """Test sub-expressions share the caller's mapping."""

    def test_caller_mapping_is_not_copied(self, parser):
        """Test parse() keeps the mapping it was given."""
        variables = {"a": 1.0}
        expression = parser.parse("a + 1", variables)
        assert expression.variables is variables

    def test_nested_expressions_share_mapping(self, parser):
        """Test parenthesis and argument expressions use the same mapping."""
        variables = VariableMap()
        expression = parser.parse("(a) + max(b, (c))", variables)
        group = expression.elements[0]
        call = expression.elements[2]
        assert group.expression.variables is variables
        assert all(arg.variables is variables for arg in call.arguments)
        assert call.arguments[1].elements[0].expression.variables is variables

    def test_nested_expressions_share_context(self, context):
        """Test sub-expressions use the parser's context."""
        expression = Parser(context).parse("(1)")
        assert expression.elements[0].expression.context is context


class TestParserErrors:
    """Test grammar violations raise ParseError."""

    @pytest.mark.parametrize(
        "text",
        ["2^", "1+", "1 + 2 *", "(1 +)", "max(1 -, 2)"],
    )
    def test_trailing_operator(self, parser, text):
        """Test expressions may not end on an operator."""
        with pytest.raises(ParseError):
            parser.parse(text)

    def test_unclosed_parenthesis(self, parser):
        """Test ( without )."""
        with pytest.raises(ParseError, match="Unclosed parenthesis"):
            parser.parse("(")

    def test_illegal_closing_parenthesis(self, parser):
        """Test ) without (."""
        with pytest.raises(ParseError, match="Illegal closing parenthesis"):
            parser.parse(")")

    def test_extra_closing_parenthesis(self, parser):
        """Test a balanced prefix followed by a stray )."""
        with pytest.raises(ParseError, match="Illegal closing parenthesis"):
            parser.parse("(1))")

    @pytest.mark.parametrize("text", ["^23", "*2", "/2", "(*2)"])
    def test_leading_non_modifier_operator(self, parser, text):
        """Test only + and - may start an expression."""
        with pytest.raises(ParseError, match="Cannot start expression"):
            parser.parse(text)

    @pytest.mark.parametrize("text", ["2 * * 3", "2 + * 3", "2 - ^ 3"])
    def test_duplicate_binary_operator(self, parser, text):
        """Test a non-modifier operator may not follow another operator."""
        with pytest.raises(ParseError, match="Unexpected token"):
            parser.parse(text)

    def test_variable_before_number(self, parser):
        """Test a 2 is rejected."""
        with pytest.raises(ParseError, match="variable directly before a number"):
            parser.parse("a 2")

    def test_number_after_number(self, parser):
        """Test 2 3 is rejected."""
        with pytest.raises(ParseError, match="Unexpected token"):
            parser.parse("2 3")

    def test_number_after_parenthesis(self, parser):
        """Test (2)3 is rejected."""
        with pytest.raises(ParseError):
            parser.parse("(2)3")

    def test_parenthesis_after_function(self, parser):
        """Test a call cannot be followed directly by a group."""
        with pytest.raises(ParseError):
            parser.parse("sin(0)(2)")

    def test_empty_parentheses(self, parser):
        """Test () that is not a call."""
        with pytest.raises(ParseError, match="Empty parentheses"):
            parser.parse("2 * ()")

    @pytest.mark.parametrize("text", ["1, 2", "(1, 2)"])
    def test_comma_outside_call(self, parser, text):
        """Test commas are only legal inside argument lists."""
        with pytest.raises(ParseError, match="Comma outside"):
            parser.parse(text)

    @pytest.mark.parametrize("text", ["max(,1)", "max(1,,2)", "max(1,)"])
    def test_misplaced_commas(self, parser, text):
        """Test leading, doubled and trailing commas."""
        with pytest.raises(ParseError):
            parser.parse(text)

    def test_error_reports_position(self, parser):
        """Test the offending position is carried on the error."""
        with pytest.raises(ParseError) as exc_info:
            parser.parse("1 + 2 3")
        assert exc_info.value.position == 6
        assert "position 6" in str(exc_info.value)
