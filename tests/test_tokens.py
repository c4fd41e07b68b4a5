import pytest

from minishell.tokens import (
    ParseError,
    Token,
    TokenType,
    check_tokens,
    classify,
    is_whitespace,
    split_words,
    tokenize,
)


@pytest.mark.parametrize(
    "word, value",
    [("<", 1), (">", 2), ("<<", 3), (">>", 4), ("|", 5), ("ls", 6)],
)
def test_token_type_values_match_header(word, value):
    assert classify(word).value == value


@pytest.mark.parametrize("char", [" ", "\t", "\n", "\r", "\v", "\f", "\b"])
def test_whitespace_characters(char):
    assert is_whitespace(char)


@pytest.mark.parametrize("char", ["a", "|", "\x07", "\x0e", "'"])
def test_non_whitespace_characters(char):
    assert not is_whitespace(char)


def test_split_simple_line():
    assert split_words("ls -l | wc") == ["ls", "-l", "|", "wc"]


def test_split_collapses_runs_of_whitespace():
    assert split_words("  echo \t  hello   ") == ["echo", "hello"]


def test_split_keeps_quoted_spans():
    line = "echo 'a b' \"c d\""
    assert split_words(line) == ["echo", "'a b'", '"c d"']


def test_split_quote_inside_word():
    assert split_words("a\"b c\"d e") == ['a"b c"d', "e"]


def test_split_empty_line():
    assert split_words("   ") == []


def test_split_round_trip_on_unquoted_words():
    words = ["cat", "file", ">", "out"]
    assert split_words(" ".join(words)) == words


@pytest.mark.parametrize(
    "word, expected",
    [
        ("<", TokenType.INPUT),
        ("<<", TokenType.HEREDOC),
        (">", TokenType.OUTPUT),
        (">>", TokenType.APPEND),
        ("|", TokenType.PIPE),
        ("ls", TokenType.STRING),
        ("'<'", TokenType.STRING),
    ],
)
def test_classify(word, expected):
    assert classify(word) is expected


def test_classify_empty_word_raises():
    with pytest.raises(ValueError):
        classify("")


def test_tokenize_keeps_text_and_types():
    tokens = tokenize("cat < in | grep x >> out")
    assert [t.text for t in tokens] == ["cat", "<", "in", "|", "grep", "x", ">>", "out"]
    assert [t.type for t in tokens] == [
        TokenType.STRING,
        TokenType.INPUT,
        TokenType.STRING,
        TokenType.PIPE,
        TokenType.STRING,
        TokenType.STRING,
        TokenType.APPEND,
        TokenType.STRING,
    ]


def test_check_tokens_accepts_valid_line():
    tokens = tokenize("cat << eof | wc > out")
    assert check_tokens(tokens) == tokens


@pytest.mark.parametrize("line", ["ls >", "ls | | wc", "cat < > f", "echo <<"])
def test_check_tokens_rejects_operator_without_word(line):
    with pytest.raises(ParseError):
        check_tokens(tokenize(line))


def test_check_tokens_error_names_token():
    with pytest.raises(ParseError) as info:
        check_tokens(tokenize("ls > > out"))
    assert info.value.token == Token(TokenType.OUTPUT, ">")
    assert str(info.value) == "> failed"