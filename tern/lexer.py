"""Tokenizer for the Tern language.

`tokenize` turns source text into a finite list of tokens terminated by an
`EOF` token. The lexer never backtracks: every character is consumed
exactly once, two-character operators are recognized with one character
of lookahead, and the first character that does not start a token raises
a `LexError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import LexError

# Token kinds
INTEGER = 'INTEGER'
REAL = 'REAL'
STRING = 'STRING'
IDENT = 'IDENT'
KEYWORD = 'KEYWORD'
BINARY_OP = 'BINARY_OP'
ASSIGN = 'ASSIGN'
EQ = 'EQ'
NOT_EQ = 'NOT_EQ'
LT = 'LT'
LT_EQ = 'LT_EQ'
GT = 'GT'
GT_EQ = 'GT_EQ'
NOT = 'NOT'
AND = 'AND'
OR = 'OR'
XOR = 'XOR'
COMMA = 'COMMA'
DOT = 'DOT'
COLON = 'COLON'
SEMICOLON = 'SEMICOLON'
LPAREN = 'LPAREN'
RPAREN = 'RPAREN'
LBRACE = 'LBRACE'
RBRACE = 'RBRACE'
LBRACKET = 'LBRACKET'
RBRACKET = 'RBRACKET'
EOF = 'EOF'

KEYWORDS = ('let', 'if', 'else', 'case', 'of', 'default', 'as', 'to', 'func')

RELATIONAL_KINDS = (LT, LT_EQ, GT, GT_EQ, EQ, NOT_EQ)

PUNCTUATION = {
    ',': COMMA,
    '.': DOT,
    ':': COLON,
    ';': SEMICOLON,
    '(': LPAREN,
    ')': RPAREN,
    '{': LBRACE,
    '}': RBRACE,
    '[': LBRACKET,
    ']': RBRACKET,
    '&': AND,
    '|': OR,
    '^': XOR,
}

# single char -> (kind, two-char kind); the second char is always '='
COMPARISON = {
    '>': (GT, GT_EQ),
    '<': (LT, LT_EQ),
    '=': (ASSIGN, EQ),
    '!': (NOT, NOT_EQ),
}

LETTERS = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ'
DIGITS = '0123456789'
WHITESPACE = ' \t\n\r'


@dataclass
class Token:
    kind: str
    value: str
    line: int = 0
    column: int = 0

    def describe(self) -> str:
        if self.kind == EOF:
            return 'end of input'
        return f"{self.kind} {self.value!r}"


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with `EOF`.

    Strings are delimited by matching single or double quotes and have no
    escape sequences; an unterminated string runs to the end of input.
    Numeric literals take digits and dots greedily and are `REAL` when a
    dot was seen. A literal with a second dot is rejected here rather than
    when it is converted to a number.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c in WHITESPACE:
            advance()
            continue
        start_line, start_col = line, col
        # Line comments
        if c == '/' and source.startswith('//', i):
            while i < length and source[i] != '\n':
                advance()
            continue
        if c in '+-*/%':
            tokens.append(Token(BINARY_OP, c, start_line, start_col))
            advance()
            continue
        if c in PUNCTUATION:
            tokens.append(Token(PUNCTUATION[c], c, start_line, start_col))
            advance()
            continue
        if c in COMPARISON:
            single, double = COMPARISON[c]
            if source.startswith('=', i + 1):
                tokens.append(Token(double, c + '=', start_line, start_col))
                advance(2)
            else:
                tokens.append(Token(single, c, start_line, start_col))
                advance()
            continue
        if c in '\'"':
            advance()
            start_i = i
            while i < length and source[i] != c:
                advance()
            value = source[start_i:i]
            if i < length:
                advance()  # closing quote
            tokens.append(Token(STRING, value, start_line, start_col))
            continue
        if c in LETTERS:
            start_i = i
            while i < length and (source[i] in LETTERS or source[i] in DIGITS or source[i] == '_'):
                advance()
            word = source[start_i:i]
            kind = KEYWORD if word in KEYWORDS else IDENT
            tokens.append(Token(kind, word, start_line, start_col))
            continue
        if c in DIGITS:
            start_i = i
            while i < length and (source[i] in DIGITS or source[i] == '.'):
                advance()
            number = source[start_i:i]
            dots = number.count('.')
            if dots > 1:
                raise LexError(f"malformed number {number!r}", start_line, start_col)
            tokens.append(Token(REAL if dots else INTEGER, number, start_line, start_col))
            continue
        raise LexError(f"unexpected character {c!r}", start_line, start_col)
    tokens.append(Token(EOF, '', line, col))
    return tokens
