"""Pygments lexer for generated Skoolbot code."""

from pygments.lexer import RegexLexer, bygroups, words
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)


class SkoolbotLexer(RegexLexer):
    """Pygments lexer for Skoolbot, the Lua dialect the block generators emit."""

    name = "Skoolbot"
    aliases = ["skoolbot"]
    filenames = ["*.skb"]
    mimetypes = ["text/x-skoolbot"]

    tokens = {
        "root": [
            # Whitespace
            (r"\s+", Text),
            # Block comments (--[[ ... ]])
            (r"--\[\[[\s\S]*?\]\]", Comment.Multiline),
            # Line comments (-- ...)
            (r"--.*$", Comment.Single),
            # Strings
            (r'"', String, "dqstring"),
            (r"'", String, "sqstring"),
            # Numbers
            (r"0x[0-9a-fA-F]+", Number.Hex),
            (r"(\d+\.\d*|\.\d+)([eE][+-]?\d+)?", Number.Float),
            (r"\d+[eE][+-]?\d+", Number.Float),
            (r"\d+", Number.Integer),
            # Function definitions
            (
                r"(function)(\s+)([A-Za-z_]\w*)",
                bygroups(Keyword.Declaration, Text, Name.Function),
            ),
            (r"\blocal\b", Keyword.Declaration),
            # Core keywords
            (
                words(
                    (
                        "and",
                        "break",
                        "do",
                        "else",
                        "elseif",
                        "end",
                        "for",
                        "function",
                        "goto",
                        "if",
                        "in",
                        "not",
                        "or",
                        "repeat",
                        "return",
                        "then",
                        "until",
                        "while",
                    ),
                    prefix=r"\b",
                    suffix=r"\b",
                ),
                Keyword,
            ),
            # Constants
            (r"\b(true|false|nil)\b", Keyword.Constant),
            # Standard library tables
            (
                words(
                    ("math", "table", "string", "os", "io", "coroutine"),
                    prefix=r"\b",
                    suffix=r"\b",
                ),
                Name.Builtin,
            ),
            (
                words(
                    ("ipairs", "pairs", "print", "type", "tonumber", "tostring"),
                    prefix=r"\b",
                    suffix=r"\b",
                ),
                Name.Builtin,
            ),
            # Operators (multi-char before single-char)
            (r"==|~=|<=|>=|\.\.", Operator),
            (r"[+\-*/%^#<>=]", Operator),
            (r"\.", Operator),
            # Identifiers
            (r"[A-Za-z_]\w*", Name),
            # Punctuation
            (r"[(),;\[\]{}:]", Punctuation),
        ],
        "dqstring": [
            (r"\\.", String.Escape),
            (r'[^"\\]+', String),
            (r'"', String, "#pop"),
        ],
        "sqstring": [
            (r"\\.", String.Escape),
            (r"[^'\\]+", String),
            (r"'", String, "#pop"),
        ],
    }
