"""
Buffer module for the NeuroNano editor.

Defines the Buffer class that owns a block of text as a list of lines together
with a cursor position. The main editing area and every small input field (AI
prompt, API key, search query, save-as filename) are Buffers; the session decides
which one receives a keystroke.
"""
import curses

TAB_WIDTH = 4
PAGE_SIZE = 20

ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (8, curses.KEY_BACKSPACE, 127)


def split_lines(text: str) -> list:
    r"""
    Split `text` on "\n" only, dropping the "\r" of a "\r\n" ending and one
    trailing empty line. Other control characters (form feed, vertical tab,
    lone "\r") stay inside their line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Buffer:
    """Represents editable text with a cursor and a cut buffer."""
    def __init__(self, lines=None):
        self.lines = list(lines) if lines is not None else [""]

        # There is always at least one line, even if lines=[]
        if not self.lines:
            self.lines = [""]

        self.cursor_line = 0
        self.cursor_col = 0
        # Top line index visible in the window
        self.scroll = 0
        # Lines removed by the last cut(), inserted again by paste()
        self.cut_lines = []

    @classmethod
    def from_text(cls, text: str) -> "Buffer":
        return cls(split_lines(text))

    def ensure_not_empty(self):
        """Ensure buffer has at least one empty line (called after deletions)."""
        if len(self.lines) == 0:
            self.lines = [""]
            self.cursor_line = 0
            self.cursor_col = 0

    def current_line(self) -> str:
        return self.lines[self.cursor_line]

    def first_line(self) -> str:
        return self.lines[0]

    def to_text(self) -> str:
        """Serialize the buffer, lines joined by a newline."""
        return "\n".join(self.lines)

    def replace_all(self, text: str):
        """Replace the whole content with `text` and put the cursor at the start."""
        self.lines = split_lines(text) or [""]
        self.cursor_line = 0
        self.cursor_col = 0
        self.scroll = 0

    def set_text(self, text: str):
        """Replace the content and put the cursor at the end (used to pre-fill fields)."""
        self.replace_all(text)
        self.cursor_line = len(self.lines) - 1
        self.cursor_col = len(self.lines[-1])

    def clear(self):
        self.replace_all("")

    def move_cursor_to(self, line: int, col: int):
        """Jump to (line, col), clamped to the buffer bounds."""
        self.cursor_line = max(0, min(line, len(self.lines) - 1))
        self.cursor_col = max(0, min(col, len(self.lines[self.cursor_line])))

    ##########################################
    # EDITING
    ##########################################
    def insert_text(self, text: str):
        """Insert text (no newlines) at the cursor."""
        line = self.lines[self.cursor_line]
        self.lines[self.cursor_line] = line[:self.cursor_col] + text + line[self.cursor_col:]
        self.cursor_col += len(text)

    def split_line(self):
        """Split the current line at the cursor position, moving the remainder to a new line below."""
        line = self.lines[self.cursor_line]
        before = line[:self.cursor_col]
        after = line[self.cursor_col:]
        self.lines[self.cursor_line] = before
        self.lines.insert(self.cursor_line + 1, after)
        self.cursor_line += 1
        self.cursor_col = 0

    def backspace(self) -> bool:
        """Delete the character left of the cursor, joining lines at column 0."""
        if self.cursor_col > 0:
            line = self.lines[self.cursor_line]
            self.lines[self.cursor_line] = line[:self.cursor_col - 1] + line[self.cursor_col:]
            self.cursor_col -= 1
            return True
        if self.cursor_line > 0:
            prev_line = self.lines[self.cursor_line - 1]
            curr_line = self.lines.pop(self.cursor_line)
            self.cursor_line -= 1
            self.cursor_col = len(prev_line)
            self.lines[self.cursor_line] = prev_line + curr_line
            return True
        return False

    def delete_forward(self) -> bool:
        """Delete the character under the cursor, joining the next line at end of line."""
        line = self.lines[self.cursor_line]
        if self.cursor_col < len(line):
            self.lines[self.cursor_line] = line[:self.cursor_col] + line[self.cursor_col + 1:]
            return True
        if self.cursor_line < len(self.lines) - 1:
            self.lines[self.cursor_line] = line + self.lines.pop(self.cursor_line + 1)
            return True
        return False

    def cut(self) -> bool:
        """Remove the current line into the cut buffer."""
        if len(self.lines) == 1 and self.lines[0] == "":
            return False
        self.cut_lines = [self.lines.pop(self.cursor_line)]
        self.ensure_not_empty()
        if self.cursor_line >= len(self.lines):
            self.cursor_line = len(self.lines) - 1
        self.cursor_col = 0
        return True

    def paste(self) -> bool:
        """Insert the cut buffer above the current line."""
        if not self.cut_lines:
            return False
        insertion_index = self.cursor_line
        self.lines[insertion_index:insertion_index] = self.cut_lines
        self.cursor_line = insertion_index + len(self.cut_lines)
        if self.cursor_line >= len(self.lines):
            self.cursor_line = len(self.lines) - 1
        self.cursor_col = 0
        return True

    ##########################################
    # KEY HANDLING
    ##########################################
    def move(self, key: int):
        """Cursor movement for arrow, Home/End and page keys."""
        if key == curses.KEY_UP and self.cursor_line > 0:
            self.cursor_line -= 1
        elif key == curses.KEY_DOWN and self.cursor_line < len(self.lines) - 1:
            self.cursor_line += 1
        elif key == curses.KEY_LEFT:
            if self.cursor_col > 0:
                self.cursor_col -= 1
            elif self.cursor_line > 0:
                self.cursor_line -= 1
                self.cursor_col = len(self.lines[self.cursor_line])
        elif key == curses.KEY_RIGHT:
            if self.cursor_col < len(self.lines[self.cursor_line]):
                self.cursor_col += 1
            elif self.cursor_line < len(self.lines) - 1:
                self.cursor_line += 1
                self.cursor_col = 0
        elif key == curses.KEY_HOME:
            self.cursor_col = 0
        elif key == curses.KEY_END:
            self.cursor_col = len(self.lines[self.cursor_line])
        elif key == curses.KEY_PPAGE:
            self.cursor_line = max(0, self.cursor_line - PAGE_SIZE)
        elif key == curses.KEY_NPAGE:
            self.cursor_line = min(len(self.lines) - 1, self.cursor_line + PAGE_SIZE)
        self.cursor_col = min(self.cursor_col, len(self.lines[self.cursor_line]))

    def edit(self, key: int) -> bool:
        """
        Apply one key code to the buffer.
        Returns True when the text changed, False for cursor movement or
        keys the buffer does not understand.
        """
        if key in ENTER_KEYS:
            self.split_line()
            return True
        if key in BACKSPACE_KEYS:
            return self.backspace()
        if key == curses.KEY_DC:
            return self.delete_forward()
        if key == 9:  # Tab
            self.insert_text(" " * TAB_WIDTH)
            return True
        if 32 <= key <= 126:
            self.insert_text(chr(key))
            return True
        self.move(key)
        return False
