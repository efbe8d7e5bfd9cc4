import pytest

from fieldlog.writer import MAX_CHUNK, LogWriter, writer_for


@pytest.fixture
def sink():
    return []


def test_writer_split_newlines(sink):
    writer = writer_for(sink.append)
    for _ in range(10):
        assert writer.write(b"bar\nfoo\n") == 8
    writer.close()
    assert len(sink) == 20
    assert sink[:4] == ["bar", "foo", "bar", "foo"]


def test_writer_splits_max_64kb(sink):
    writer = writer_for(sink.append)
    big_write_len = MAX_CHUNK + 100
    output = b"A" * big_write_len
    for _ in range(3):
        assert writer.write(output) == big_write_len
    writer.close()
    assert len(sink) == 4
    assert [len(message) for message in sink[:3]] == [MAX_CHUNK] * 3
    assert "".join(sink) == "A" * (3 * big_write_len)


def test_chunk_ignores_embedded_newlines(sink):
    with LogWriter(sink.append) as writer:
        writer.write(b"x\n" * 40000)
    assert "\n" in sink[0]
    assert "".join(sink).replace("\n", "") == "x" * 40000


def test_trailing_carriage_return_trimmed(sink):
    with LogWriter(sink.append) as writer:
        writer.write(b"hello\r\n")
    assert sink == ["hello"]


def test_partial_line_held_until_close(sink):
    writer = LogWriter(sink.append)
    writer.write(b"first\nsecond")
    assert sink == ["first"]
    writer.close()
    assert sink == ["first", "second"]


def test_line_spanning_writes(sink):
    with LogWriter(sink.append) as writer:
        writer.write(b"hel")
        writer.write(b"lo\n")
    assert sink == ["hello"]


def test_empty_lines_are_logged(sink):
    with LogWriter(sink.append) as writer:
        writer.write(b"a\n\nb\n")
    assert sink == ["a", "", "b"]


def test_text_input(sink):
    with LogWriter(sink.append) as writer:
        assert writer.write("héllo\n") == 6
    assert sink == ["héllo"]


def test_write_after_close_raises(sink):
    writer = LogWriter(sink.append)
    writer.close()
    assert writer.closed is True
    with pytest.raises(ValueError):
        writer.write(b"late\n")


def test_close_is_idempotent(sink):
    writer = LogWriter(sink.append)
    writer.write(b"tail")
    writer.close()
    writer.close()
    assert sink == ["tail"]


def test_open_writer_reports_not_closed(sink):
    writer = LogWriter(sink.append)
    assert writer.closed is False
    assert writer.writable() is True
    writer.close()
    assert sink == []