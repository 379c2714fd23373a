import pytest

from tern.errors import LexError
from tern.lexer import (
    tokenize, KEYWORD, IDENT, ASSIGN, REAL, INTEGER, STRING, SEMICOLON, EOF,
    LT, LT_EQ, GT, GT_EQ, EQ, NOT_EQ, NOT, AND, OR, XOR, BINARY_OP,
)


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_declaration_tokens():
    assert kinds("let x = 1.5;") == [KEYWORD, IDENT, ASSIGN, REAL, SEMICOLON, EOF]
    assert kinds("let n = 15;")[3] == INTEGER


def test_two_char_operators_fall_back_to_single():
    assert kinds("<= >= == != < > = !") == [
        LT_EQ, GT_EQ, EQ, NOT_EQ, LT, GT, ASSIGN, NOT, EOF,
    ]


def test_bitwise_markers_are_lexed():
    assert kinds("& | ^") == [AND, OR, XOR, EOF]


def test_line_comment_is_skipped():
    tokens = tokenize("a // b c\n/ d")
    assert [(t.kind, t.value) for t in tokens] == [
        (IDENT, 'a'), (BINARY_OP, '/'), (IDENT, 'd'), (EOF, ''),
    ]


def test_token_positions():
    tokens = tokenize("let a\n  = 10;")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[2].line, tokens[2].column) == (2, 3)
    assert (tokens[3].line, tokens[3].column) == (2, 5)


def test_carriage_returns_are_whitespace():
    assert kinds("a\r\nb") == [IDENT, IDENT, EOF]


def test_strings_have_no_escapes():
    tokens = tokenize(r"""'say "hi"' "a\nb" """)
    assert tokens[0].kind == STRING
    assert tokens[0].value == 'say "hi"'
    assert tokens[1].value == 'a\\nb'


def test_unterminated_string_runs_to_end():
    tokens = tokenize('print("abc')
    assert tokens[-2].kind == STRING
    assert tokens[-2].value == 'abc'
    assert tokens[-1].kind == EOF


def test_keywords_and_identifiers():
    tokens = tokenize("letter is_empty x1 to")
    assert [(t.kind, t.value) for t in tokens[:-1]] == [
        (IDENT, 'letter'), (IDENT, 'is_empty'), (IDENT, 'x1'), (KEYWORD, 'to'),
    ]


def test_number_with_two_dots_is_rejected():
    with pytest.raises(LexError) as exc:
        tokenize("x = 1.2.3")
    assert (exc.value.line, exc.value.column) == (1, 5)


def test_unexpected_character():
    with pytest.raises(LexError) as exc:
        tokenize("a\n @")
    assert (exc.value.line, exc.value.column) == (2, 2)
    assert "'@'" in exc.value.message
