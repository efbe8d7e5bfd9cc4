# fieldlog

Building blocks for structured, levelled logging:

- `fieldlog.levels`: the `Level` enum (`PANIC`, `FATAL`, `ERROR`, `WARN`,
  `INFO`, `DEBUG`, `TRACE`; a lower value is more severe), `ALL_LEVELS`,
  `parse_level` for case-insensitive parsing, and text marshalling with
  `Level.marshal_text` and `Level.unmarshal_text`.
- `fieldlog.text_formatter`: a `TextFormatter` that renders a `Record` as
  one logfmt-style line of `key=value` pairs. It can also produce coloured
  terminal output.
- `fieldlog.writer`: a `LogWriter`, created with `writer_for`, which turns
  arbitrary written text into one call of a print function per line.
- `fieldlog.terminal`: `check_if_terminal` reports whether a stream is
  backed by a terminal.

## Installation

```
pip install fieldlog
```

## Levels

```python
from fieldlog.levels import Level, parse_level

parse_level("WARN")            # Level.WARN
parse_level(b"warning")        # Level.WARN
str(Level.WARN)                # "warning"
Level.INFO.marshal_text()      # b"info"
Level.unmarshal_text(b"debug") # Level.DEBUG
parse_level("loud")            # raises ValueError: not a valid level: "loud"
```

## Text formatting

```python
from fieldlog.levels import Level
from fieldlog.text_formatter import Record, TextFormatter

formatter = TextFormatter(disable_colors=True, disable_timestamp=True)
record = Record(level=Level.INFO, message="A group of walrus emerges",
                data={"animal": "walrus", "size": 10})
formatter.format(record)
# 'level=info msg="A group of walrus emerges" animal=walrus size=10\n'
```

`format` returns a `str` ending in a newline. In plain output the default
keys come first (`time`, `level`, `msg`, `fieldlog_error`, and `func` and
`file` when the record has a `caller` `Frame`), followed by the record's
fields sorted by name.

Options of `TextFormatter`:

- Quoting: a value is quoted when it contains characters outside letters,
  digits and `- . _ / @ ^ +`. `force_quote` quotes every value, numbers and
  booleans included. `disable_quote` turns quoting off unless `force_quote`
  is set. `quote_empty_fields` quotes empty values.
- Time: `disable_timestamp` drops the time. `timestamp_format` is a
  `strftime` pattern; when it is empty, times are written in RFC 3339 form.
- Ordering: `disable_sorting` keeps the fields in insertion order.
  `sorting_func` sorts the list of keys in place instead of the default sort.
- Keys: `field_map` renames default keys, e.g. `{"msg": "message"}`. User
  fields whose names clash with a default key are renamed with a `fields.`
  prefix.
- Caller: `caller_prettyfier` maps a `Frame` to `(function, file)` texts.
  An empty text drops that field.
- Colour: colours are used when `force_colors` is set, or when the record's
  `output` stream is a terminal (not on Windows). `disable_colors` turns
  them off. With `environment_override_colors`, the `CLICOLOR_FORCE` and
  `CLICOLOR` environment variables decide instead. `is_colored` exposes this
  decision.
- Coloured lines show the upper-cased level, cut to four characters unless
  `disable_level_truncation` or `pad_level_text` is set.
  `pad_level_text` pads every level to the same width. Next comes the number
  of seconds since the module was loaded, or the full time with
  `full_timestamp`. The message is padded to 44 characters, and the fields
  follow.

## Writing lines into a log

```python
from fieldlog.writer import writer_for

lines = []
writer = writer_for(lines.append)
writer.write(b"bar\nfoo\n")
writer.close()
# lines == ["bar", "foo"]
```

`write` accepts `str` or bytes-like data and returns its length. Each
complete line is passed on with trailing `\r` and `\n` removed. Any
buffered run of 64 KiB is passed on as one message, newline or not. Text
left without a newline is passed on when the writer is closed. The writer
is also a context manager, and writing after `close` raises `ValueError`.

## What is not included

The package has no logger object. There are no hooks, no output handling
and no JSON formatter. You build `Record` values yourself and write the
formatted text wherever you like. Any function taking one string can serve
as the print function of a `LogWriter`.