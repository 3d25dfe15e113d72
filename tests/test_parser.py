"""Tests for css_syntax.parser."""

import math

import pytest

from css_syntax.ast_nodes import (
    AtKeyword,
    BooleanExpr,
    Combinator,
    Comma,
    Function,
    Group,
    Keyword,
    Multiplier,
    Property,
    String,
    Token,
    Type,
    TypeRange,
)
from css_syntax.errors import (
    ExpectedCharError,
    ExpectedFunctionError,
    ExpectedKeywordError,
    ExpectedRangeNodeError,
    ParseError,
    UnexpectedInputError,
)
from css_syntax.parser import parse


class TestTerms:

    def test_keyword(self):
        assert parse("auto") == Keyword("auto")

    def test_type(self):
        assert parse("<length>") == Type("length")

    def test_function_type(self):
        assert parse("<rgb()>") == Type("rgb()")

    def test_property(self):
        assert parse("<'padding-top'>") == Property("padding-top")

    def test_at_keyword(self):
        assert parse("@media") == AtKeyword("media")

    def test_lone_at_sign_is_token(self):
        assert parse("@") == Token("@")

    def test_single_quoted_string(self):
        assert parse("'+'") == String("'+'")

    def test_double_quoted_string(self):
        assert parse('"/"') == String('"/"')

    def test_token(self):
        assert parse("/") == Token("/")

    def test_brace_token(self):
        node = parse("@media <media-query-list> { <rule-list> }")
        assert node == Group((
            AtKeyword("media"),
            Type("media-query-list"),
            Token("{"),
            Type("rule-list"),
            Token("}"),
        ))

    def test_whitespace_is_insignificant(self):
        assert parse("  auto   |\n<length>  ") == parse("auto | <length>")


class TestExamples:

    def test_alternatives(self):
        assert parse("auto | <length>") == Group(
            (Keyword("auto"), Type("length")), Combinator.EXACTLY_ONE
        )

    def test_comma_multiplier_with_range(self):
        assert parse("<length-percentage>#{1,4}") == Multiplier(
            Type("length-percentage"), min=1, max=4, comma_separated=True
        )

    def test_function_args(self):
        node = parse("rect( <top>, <right>, <bottom>, <left> )")
        assert node == Function(
            "rect",
            Group((
                Type("top"), Comma(),
                Type("right"), Comma(),
                Type("bottom"), Comma(),
                Type("left"),
            )),
        )

    def test_multiplied_group(self):
        node = parse("[ <length> | auto ]{1,2}")
        assert isinstance(node, Multiplier)
        assert node.min == 1
        assert node.max == 2
        assert not node.comma_separated
        assert node.term.terms == (Type("length"), Keyword("auto"))
        assert node.term.combinator is Combinator.EXACTLY_ONE
        assert node.term.explicit


class TestPrecedence:

    def test_juxtaposition_binds_tightest(self):
        node = parse("a b | c")
        assert node == Group(
            (Group((Keyword("a"), Keyword("b"))), Keyword("c")),
            Combinator.EXACTLY_ONE,
        )

    def test_double_ampersand_over_double_bar(self):
        node = parse("a && b || c")
        assert node.combinator is Combinator.ONE_OR_MORE_ANY_ORDER
        assert node.terms[0] == Group((Keyword("a"), Keyword("b")), Combinator.ALL_ANY_ORDER)

    def test_double_bar_over_single_bar(self):
        node = parse("a || b | c")
        assert node.combinator is Combinator.EXACTLY_ONE
        assert node.terms[0].combinator is Combinator.ONE_OR_MORE_ANY_ORDER

    def test_all_levels(self):
        node = parse("a b | c() && [ <d>? || <'e'> || ( f{2,4} ) ]*")
        assert node.combinator is Combinator.EXACTLY_ONE
        left, right = node.terms
        assert left == Group((Keyword("a"), Keyword("b")))
        assert right.combinator is Combinator.ALL_ANY_ORDER
        assert right.terms[0] == Function("c")
        star = right.terms[1]
        assert star.min == 0 and star.max is None
        inner = star.term
        assert inner.combinator is Combinator.ONE_OR_MORE_ANY_ORDER
        assert inner.terms[0] == Multiplier(Type("d"), 0, 1)
        assert inner.terms[1] == Property("e")
        assert inner.terms[2] == Group((Token("("), Multiplier(Keyword("f"), 2, 4), Token(")")))

    def test_same_combinator_is_flat(self):
        node = parse("a | b | c | d")
        assert len(node.terms) == 4


class TestGroups:

    def test_bracketed_single_term_collapses(self):
        assert parse("[ auto ]") == Keyword("auto")

    def test_bracketed_single_term_keeps_multiplier(self):
        assert parse("[ auto ]?") == Multiplier(Keyword("auto"), 0, 1)

    def test_bracketed_single_term_must_produce_value(self):
        node = parse("[ a ]!")
        assert node == Group((Keyword("a"),), must_produce_value=True, explicit=True)

    def test_bracketed_single_term_must_produce_value_with_multiplier(self):
        node = parse("[ <integer> ]!#")
        assert node == Multiplier(
            Group((Type("integer"),), must_produce_value=True, explicit=True), 1, None, True
        )

    def test_no_single_term_juxtaposition_group(self):
        def check(node):
            if isinstance(node, Group):
                assert len(node.terms) > 1 or node.must_produce_value
                for term in node.terms:
                    check(term)
            elif isinstance(node, (Multiplier, BooleanExpr)):
                check(node.term)
            elif isinstance(node, Function) and node.args is not None:
                check(node.args)

        check(parse("[ [ a ] [ b ] ] | [ c ]+ | fn( [ d ] )"))

    def test_must_produce_value(self):
        node = parse("[ a || b ]!")
        assert node.must_produce_value
        assert node.explicit

    def test_explicit_group_inside_alternatives(self):
        node = parse("[ a b ] | c")
        assert node.terms[0].explicit
        assert not node.explicit

    def test_nested_brackets(self):
        node = parse("<calc-product> [ [ '+' | '-' ] <calc-product> ]*")
        star = node.terms[1]
        assert star.term.terms[0] == Group(
            (String("'+'"), String("'-'")), Combinator.EXACTLY_ONE, explicit=True
        )


class TestMultipliers:

    @pytest.mark.parametrize("source, low, high, comma", [
        ("a*", 0, None, False),
        ("a+", 1, None, False),
        ("a?", 0, 1, False),
        ("a#", 1, None, True),
        ("a#?", 0, None, True),
        ("a{3}", 3, 3, False),
        ("a{2,}", 2, None, False),
        ("a{1,4}", 1, 4, False),
        ("a#{2}", 2, 2, True),
        ("a#{1,}", 1, None, True),
        ("a#{0,3}", 0, 3, True),
    ])
    def test_spellings(self, source, low, high, comma):
        assert parse(source) == Multiplier(Keyword("a"), low, high, comma)

    def test_plus_hash_stacks(self):
        assert parse("<foo>+#") == Multiplier(
            Multiplier(Type("foo"), 1, None), 1, None, comma_separated=True
        )

    def test_plus_hash_with_range(self):
        assert parse("<foo>+#{1,2}") == Multiplier(
            Multiplier(Type("foo"), 1, None), 1, 2, comma_separated=True
        )

    def test_multiplier_on_string(self):
        assert parse("'a'*") == Multiplier(String("'a'"), 0, None)

    def test_multiplier_on_function(self):
        assert parse("fn( a )?") == Multiplier(Function("fn", Keyword("a")), 0, 1)

    def test_range_whitespace_allowed(self):
        assert parse("a{ 1 , 2 }") == Multiplier(Keyword("a"), 1, 2)

    def test_inverted_range_rejected(self):
        with pytest.raises(ExpectedRangeNodeError):
            parse("a{3,1}")

    def test_non_numeric_max_rejected(self):
        with pytest.raises(ExpectedRangeNodeError):
            parse("a{1,x}")

    def test_unterminated_range(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("a{1,2")
        assert exc.value.char == "}"

    def test_leading_multiplier_rejected(self):
        with pytest.raises(UnexpectedInputError):
            parse("* a")


class TestTypeRanges:

    def test_non_negative(self):
        assert parse("<length [0,∞]>") == Type("length", TypeRange(0, math.inf))

    def test_negative_infinity(self):
        assert parse("<number [-∞,∞]>") == Type("number", TypeRange(-math.inf, math.inf))

    def test_integer_bounds(self):
        assert parse("<integer [1,1000]>") == Type("integer", TypeRange(1, 1000))

    def test_units(self):
        node = parse("<angle [-90deg,90deg]>")
        assert node.range == TypeRange(-90, 90, "deg", "deg")

    def test_decimal(self):
        assert parse("<number [0,0.5]>").range == TypeRange(0, 0.5)

    def test_whitespace_inside(self):
        assert parse("<length [ 0 , ∞ ]>") == parse("<length [0,∞]>")

    def test_mismatched_units(self):
        with pytest.raises(ExpectedRangeNodeError):
            parse("<angle [0deg,1turn]>")

    def test_inverted(self):
        with pytest.raises(ExpectedRangeNodeError):
            parse("<integer [5,1]>")

    def test_not_a_number(self):
        with pytest.raises(ExpectedRangeNodeError):
            parse("<integer [a,b]>")

    def test_missing_comma(self):
        with pytest.raises(ExpectedCharError):
            parse("<integer [1 2]>")


class TestFunctions:

    def test_empty_arguments(self):
        assert parse("c()") == Function("c")

    def test_empty_arguments_with_space(self):
        assert parse("c( )") == Function("c")

    def test_single_argument(self):
        assert parse("sin( <calc-sum> )") == Function("sin", Type("calc-sum"))

    def test_nested_function(self):
        node = parse("a( b( c ) )")
        assert node == Function("a", Function("b", Keyword("c")))

    def test_unclosed_function(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("rect( <top>")
        assert exc.value.char == ")"

    def test_function_at_end_of_input(self):
        with pytest.raises(ExpectedFunctionError):
            parse("rect(")

    def test_bare_parens_inside_function(self):
        node = parse("f( ( a ) b )")
        assert node == Function("f", Group((Token("("), Keyword("a"), Token(")"), Keyword("b"))))


class TestBooleanExpr:

    def test_wraps_grammar(self):
        node = parse("<boolean-expr[ <supports-test> ]>")
        assert node == BooleanExpr(Type("supports-test"))

    def test_wraps_alternatives(self):
        node = parse("<boolean-expr[ <a> | <b> ]>")
        assert node == BooleanExpr(Group((Type("a"), Type("b")), Combinator.EXACTLY_ONE))

    def test_in_context(self):
        node = parse("if( <boolean-expr[ <if-test> ]> : <value> )")
        assert node.args.terms[0] == BooleanExpr(Type("if-test"))
        assert node.args.terms[1] == Token(":")


class TestParseErrors:

    def test_empty_input(self):
        with pytest.raises(UnexpectedInputError):
            parse("")

    def test_whitespace_only(self):
        with pytest.raises(UnexpectedInputError):
            parse("   ")

    def test_empty_group(self):
        with pytest.raises(UnexpectedInputError):
            parse("[ ]")

    def test_unbalanced_open_bracket(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("[ a | b")
        assert exc.value.char == "]"

    def test_stray_close_bracket(self):
        with pytest.raises(UnexpectedInputError):
            parse("a ]")

    def test_stray_close_paren(self):
        with pytest.raises(UnexpectedInputError):
            parse("a )")

    def test_trailing_combinator(self):
        with pytest.raises(UnexpectedInputError):
            parse("a |")

    def test_leading_combinator(self):
        with pytest.raises(UnexpectedInputError):
            parse("| a")

    def test_single_ampersand(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("a & b")
        assert exc.value.char == "&"

    def test_unterminated_type(self):
        with pytest.raises(ParseError):
            parse("<length")

    def test_empty_type_name(self):
        with pytest.raises(ExpectedKeywordError):
            parse("<>")

    def test_unterminated_property(self):
        with pytest.raises(ExpectedKeywordError):
            parse("<'padding")

    def test_property_missing_quote(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("<'padding>")
        assert exc.value.char == "'"

    def test_unterminated_string(self):
        with pytest.raises(ExpectedCharError) as exc:
            parse("'abc")
        assert exc.value.char == "'"

    def test_error_carries_position(self):
        with pytest.raises(UnexpectedInputError) as exc:
            parse("a ]")
        assert exc.value.position == 2
        assert str(exc.value).endswith("(at 2)")


class TestDeterminism:

    def test_same_input_same_tree(self):
        source = "[ <length> | auto ]{1,2} || <color>#"
        assert parse(source) == parse(source)
        assert hash(parse(source)) == hash(parse(source))
