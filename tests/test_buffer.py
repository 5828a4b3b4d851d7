import curses

from neuronano.buffer import Buffer


def type_text(buf, text):
    for ch in text:
        buf.edit(ord(ch))


def test_empty_buffer_has_one_line():
    assert Buffer([]).lines == [""]
    assert Buffer().to_text() == ""


def test_typing_inserts_at_cursor_and_reports_change():
    buf = Buffer(["hllo"])
    buf.move_cursor_to(0, 1)
    assert buf.edit(ord("e")) is True
    assert buf.lines == ["hello"]
    assert (buf.cursor_line, buf.cursor_col) == (0, 2)


def test_cursor_keys_do_not_change_text():
    buf = Buffer(["abc", "de"])
    for key in (curses.KEY_DOWN, curses.KEY_RIGHT, curses.KEY_END, curses.KEY_UP, curses.KEY_HOME):
        assert buf.edit(key) is False
    assert buf.lines == ["abc", "de"]
    assert (buf.cursor_line, buf.cursor_col) == (0, 0)


def test_down_clamps_column_to_shorter_line():
    buf = Buffer(["abcdef", "xy"])
    buf.move_cursor_to(0, 5)
    buf.edit(curses.KEY_DOWN)
    assert (buf.cursor_line, buf.cursor_col) == (1, 2)


def test_enter_splits_line_and_backspace_joins_it_again():
    buf = Buffer(["helloworld"])
    buf.move_cursor_to(0, 5)
    assert buf.edit(10) is True
    assert buf.lines == ["hello", "world"]
    assert (buf.cursor_line, buf.cursor_col) == (1, 0)
    assert buf.edit(127) is True
    assert buf.lines == ["helloworld"]
    assert (buf.cursor_line, buf.cursor_col) == (0, 5)


def test_backspace_at_start_of_buffer_is_not_a_change():
    buf = Buffer(["abc"])
    assert buf.edit(curses.KEY_BACKSPACE) is False
    assert buf.lines == ["abc"]


def test_delete_joins_next_line_at_end_of_line():
    buf = Buffer(["ab", "cd"])
    buf.move_cursor_to(0, 2)
    assert buf.edit(curses.KEY_DC) is True
    assert buf.lines == ["abcd"]
    buf.move_cursor_to(0, 4)
    assert buf.edit(curses.KEY_DC) is False


def test_tab_inserts_spaces():
    buf = Buffer()
    buf.edit(9)
    assert buf.lines == ["    "]


def test_unknown_keys_are_ignored():
    buf = Buffer(["abc"])
    assert buf.edit(curses.KEY_F5) is False
    assert buf.edit(200) is False
    assert buf.lines == ["abc"]


def test_cut_and_paste_move_a_line():
    buf = Buffer(["one", "two", "three"])
    assert buf.cut() is True
    assert buf.lines == ["two", "three"]
    buf.move_cursor_to(1, 0)
    assert buf.paste() is True
    assert buf.lines == ["two", "one", "three"]


def test_cut_on_empty_buffer_and_paste_with_nothing_cut():
    buf = Buffer()
    assert buf.cut() is False
    assert buf.paste() is False
    assert buf.lines == [""]


def test_cut_last_line_keeps_cursor_in_range():
    buf = Buffer(["a", "b"])
    buf.move_cursor_to(1, 0)
    buf.cut()
    assert buf.lines == ["a"]
    assert buf.cursor_line == 0


def test_move_cursor_to_is_clamped():
    buf = Buffer(["abc", "de"])
    buf.move_cursor_to(10, 10)
    assert (buf.cursor_line, buf.cursor_col) == (1, 2)
    buf.move_cursor_to(-1, -5)
    assert (buf.cursor_line, buf.cursor_col) == (0, 0)


def test_replace_all_resets_cursor():
    buf = Buffer(["old", "text"])
    buf.move_cursor_to(1, 3)
    buf.replace_all("new\ncontent\nhere")
    assert buf.lines == ["new", "content", "here"]
    assert (buf.cursor_line, buf.cursor_col) == (0, 0)
    buf.replace_all("")
    assert buf.lines == [""]


def test_set_text_puts_cursor_at_end():
    buf = Buffer()
    buf.set_text("notes.txt")
    type_text(buf, ".bak")
    assert buf.first_line() == "notes.txt.bak"


def test_from_text_splits_only_on_newlines():
    buf = Buffer.from_text("a\x0cb\nc\x0bd\re\n")
    assert buf.lines == ["a\x0cb", "c\x0bd\re"]


def test_from_text_drops_carriage_return_of_crlf():
    assert Buffer.from_text("one\r\ntwo\r\n").lines == ["one", "two"]


def test_replace_all_keeps_form_feed_inside_line():
    buf = Buffer(["old"])
    buf.replace_all("page one\x0cpage two\u2028same line")
    assert buf.lines == ["page one\x0cpage two\u2028same line"]


def test_to_text_joins_lines_with_newline():
    assert Buffer(["a", "", "b"]).to_text() == "a\n\nb"
