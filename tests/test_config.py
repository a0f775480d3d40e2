"""
Tests for configuration parsing, loading and validation.
"""

import pytest

from hoststat.config.lexer import LexerError, TokenType, tokenize
from hoststat.config.loader import ConfigError, ConfigLoader
from hoststat.config.parser import ParseError, parse_config
from hoststat.config.schema import Config, SystemConfig


def test_load_example_config(example_config_path) -> None:
    """Test that example config loads without errors."""
    loader = ConfigLoader()
    config = loader.load_file(example_config_path)

    assert isinstance(config, Config)
    assert config.defaults.interval == 15
    assert config.output.queue_size == 1000
    assert config.system == [SystemConfig()]
    assert loader.validate(config) == []


def test_missing_blocks_use_defaults() -> None:
    config = ConfigLoader().load_string("")

    assert config.defaults.interval == 15.0
    assert config.logging.level == "info"
    assert config.logging.file is None
    assert config.system == []


def test_system_block_options() -> None:
    config = ConfigLoader().load_string(
        """
        system {
            interval_seconds 30;
            collect_user_number on;
            print_configs true;
        }
        """
    )

    assert config.system == [
        SystemConfig(interval_seconds=30, collect_user_number=True, print_configs=True)
    ]
    assert config.inputs() == [("system", config.system[0])]


def test_interval_accepts_durations() -> None:
    config = ConfigLoader().load_string("defaults { interval 2m; } system { interval_seconds 90s; }")

    assert config.defaults.interval == 120
    assert config.system[0].interval_seconds == 90


def test_negative_interval_rejected() -> None:
    with pytest.raises(ConfigError, match="interval_seconds"):
        ConfigLoader().load_string("system { interval_seconds -1; }")


def test_non_numeric_interval_rejected() -> None:
    with pytest.raises(ConfigError, match="must be a number"):
        ConfigLoader().load_string('system { interval_seconds "soon"; }')


def test_zero_queue_size_rejected() -> None:
    with pytest.raises(ConfigError, match="queue_size"):
        ConfigLoader().load_string("output { queue_size 0; }")


def test_parse_error_reports_line() -> None:
    with pytest.raises(ConfigError, match="Line 3"):
        ConfigLoader().load_string("system {\n  interval_seconds 5;\n  print_configs on }\n")


def test_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        ConfigLoader().load_file(tmp_path / "absent.conf")


def test_validate_warns_about_unknown_entries() -> None:
    loader = ConfigLoader()
    config = loader.load_string(
        """
        hostname "box";
        system { collect_users on; }
        mqtt { host "x"; }
        """
    )
    warnings = loader.validate(config)

    assert any("top-level directive 'hostname'" in w for w in warnings)
    assert any("'collect_users' in system block" in w for w in warnings)
    assert any("Unknown block 'mqtt'" in w for w in warnings)


def test_validate_warns_without_system_block() -> None:
    loader = ConfigLoader()
    warnings = loader.validate(loader.load_string("defaults { interval 5s; }"))

    assert any("No 'system' block" in w for w in warnings)


def test_tokenize_values() -> None:
    tokens = tokenize('a 10 2.5 500ms on "x\\"y" /* skip\n me */ b; # tail\n}')
    kinds = [t.type for t in tokens]

    assert kinds == [
        TokenType.IDENTIFIER,
        TokenType.NUMBER,
        TokenType.NUMBER,
        TokenType.DURATION,
        TokenType.BOOLEAN,
        TokenType.STRING,
        TokenType.IDENTIFIER,
        TokenType.SEMICOLON,
        TokenType.RBRACE,
        TokenType.EOF,
    ]
    assert tokens[3].value == pytest.approx(0.5)
    assert tokens[5].value == 'x"y'
    assert tokens[6].line == 2
    assert tokens[8].line == 3


@pytest.mark.parametrize(
    "source, message",
    [
        ("a 5parsecs;", "Unknown duration unit"),
        ('a "open;', "Unterminated string"),
        ("a /* never closed", "Unterminated multi-line comment"),
        ("a @;", "Unexpected character"),
    ],
)
def test_lexer_errors(source, message) -> None:
    with pytest.raises(LexerError, match=message):
        tokenize(source)


def test_parser_nested_blocks_and_names() -> None:
    doc = parse_config('system "main" { inner { x 1; } y 2 3; }')

    block = doc.get_block("system")
    assert block.name == "main"
    assert block.get_block("inner").get_value("x") == 1
    assert block.get_directive("y").values == [2, 3]


def test_parser_rejects_unclosed_block() -> None:
    with pytest.raises(ParseError, match="close 'system'"):
        parse_config("system { x 1;")


@pytest.mark.parametrize("value", ["500ms", "1.9"])
def test_fractional_interval_seconds_rejected(value) -> None:
    with pytest.raises(ConfigError, match="whole number of seconds"):
        ConfigLoader().load_string(f"defaults {{ interval 60s; }} system {{ interval_seconds {value}; }}")


def test_whole_interval_from_duration_accepted() -> None:
    config = ConfigLoader().load_string("system { interval_seconds 2m; }")

    assert config.system[0].interval_seconds == 120
