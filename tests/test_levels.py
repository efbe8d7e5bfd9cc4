import pytest

from fieldlog.levels import ALL_LEVELS, Level, parse_level


@pytest.mark.parametrize(
    "name, expected",
    [
        ("trace", "trace"),
        ("debug", "debug"),
        ("info", "info"),
        ("warn", "warning"),
        ("error", "error"),
        ("fatal", "fatal"),
        ("panic", "panic"),
    ],
)
def test_convert_level_to_string(name, expected):
    assert str(parse_level(name)) == expected


def test_format_uses_name():
    assert f"{parse_level('warn')}" == "warning"
    assert f"[{parse_level('info'):>6}]" == "[  info]"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("panic", Level.PANIC),
        ("PANIC", Level.PANIC),
        ("fatal", Level.FATAL),
        ("FATAL", Level.FATAL),
        ("error", Level.ERROR),
        ("ERROR", Level.ERROR),
        ("warn", Level.WARN),
        ("WARN", Level.WARN),
        ("warning", Level.WARN),
        ("WARNING", Level.WARN),
        ("info", Level.INFO),
        ("INFO", Level.INFO),
        ("debug", Level.DEBUG),
        ("DEBUG", Level.DEBUG),
        ("trace", Level.TRACE),
        ("TRACE", Level.TRACE),
    ],
)
def test_parse_level(name, expected):
    assert parse_level(name) is expected


def test_parse_level_accepts_bytes():
    assert parse_level(b"Debug") is Level.DEBUG


def test_parse_level_invalid():
    with pytest.raises(ValueError) as info:
        parse_level("invalid")
    assert str(info.value) == 'not a valid level: "invalid"'


def test_unmarshal_text():
    assert Level.unmarshal_text(b"warn") is Level.WARN
    with pytest.raises(ValueError):
        Level.unmarshal_text(b"loud")


@pytest.mark.parametrize("level", list(Level))
def test_marshal_round_trip(level):
    assert Level.unmarshal_text(level.marshal_text()) is level


def test_marshal_text_value():
    assert Level.WARN.marshal_text() == b"warning"


def test_all_levels_order():
    names = ("panic", "fatal", "error", "warn", "info", "debug", "trace")
    assert ALL_LEVELS == tuple(parse_level(name) for name in names)


def test_severity_ordering():
    assert (
        parse_level("panic")
        < parse_level("error")
        < parse_level("info")
        < parse_level("trace")
    )


def test_unknown_numeric_level_rejected():
    with pytest.raises(ValueError):
        Level(32000)