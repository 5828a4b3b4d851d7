"""
neuronano/ui/screen.py

Implements all drawing for the NeuroNano editor: the header line, the text area
with line numbers, the two-line footer (status message and shortcut hints) and
the box each non-editing mode pops up over the text.
"""

import curses

from wcwidth import wcwidth, wcswidth

from neuronano.logger import safe_addstr
from neuronano.session import Mode

APP_TITLE = "  NeuroNano  "

# Color pair ids
PAIR_HEADER = 1
PAIR_TEXT = 2
PAIR_GUTTER = 3
PAIR_FOOTER = 4
PAIR_STATUS = 5
PAIR_POPUP = 6
PAIR_WARNING = 7
PAIR_THINKING = 8

# Header accent by language label
LANGUAGE_COLORS = {
    "Rust": curses.COLOR_RED,
    "JSON": curses.COLOR_GREEN,
    "Markdown": curses.COLOR_BLUE,
    "Python": curses.COLOR_YELLOW,
}
DEFAULT_ACCENT = curses.COLOR_CYAN

SHORTCUTS = {
    Mode.NORMAL: [("^X", "Exit"), ("^O", "Save"), ("^K", "Cut"), ("^U", "Paste"),
                  ("^F", "Search"), ("^P", "AI Prompt")],
    Mode.PROMPTING: [("Esc", "Cancel"), ("Enter", "Generate")],
    Mode.SETUP: [("Esc", "Quit"), ("Enter", "Save & Start")],
    Mode.PROCESSING: [("", "Processing... Please wait."), ("^X", "Exit")],
    Mode.SEARCH: [("Esc", "Cancel"), ("Enter", "Find")],
    Mode.SAVE_AS: [("Esc", "Cancel"), ("Enter", "Save")],
    Mode.CONFIRM_QUIT: [("Y", "Yes"), ("N", "No"), ("Esc", "Cancel")],
}

API_KEY_URL = "https://aistudio.google.com/app/apikey"


def init_colors():
    """Set up the color pairs used by the editor."""
    curses.start_color()
    try:
        curses.use_default_colors()
        background = -1
    except curses.error:
        background = curses.COLOR_BLACK
    curses.init_pair(PAIR_HEADER, curses.COLOR_BLACK, DEFAULT_ACCENT)
    curses.init_pair(PAIR_TEXT, curses.COLOR_WHITE, background)
    curses.init_pair(PAIR_GUTTER, curses.COLOR_BLUE, background)
    curses.init_pair(PAIR_FOOTER, curses.COLOR_BLACK, curses.COLOR_WHITE)
    curses.init_pair(PAIR_STATUS, curses.COLOR_BLACK, curses.COLOR_YELLOW)
    curses.init_pair(PAIR_POPUP, curses.COLOR_WHITE, curses.COLOR_BLACK)
    curses.init_pair(PAIR_WARNING, curses.COLOR_WHITE, curses.COLOR_RED)
    curses.init_pair(PAIR_THINKING, curses.COLOR_WHITE, curses.COLOR_BLUE)


def clip(text: str, width: int) -> str:
    """Trim `text` to at most `width` terminal cells."""
    out = []
    used = 0
    for ch in text:
        w = max(wcwidth(ch), 0)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def pad_line(text: str, width: int) -> str:
    """Pad or trim a string to match the visual width."""
    text = clip(text, width)
    visual_width = max(wcswidth(text), 0)
    return text + " " * max(0, width - visual_width)


def field_view(field, width: int):
    """
    Visible part of a one-line input field and the cursor offset inside it,
    scrolled so the cursor stays in view.
    """
    line = field.first_line()
    col = min(field.cursor_col, len(line))
    start = max(0, col - width + 1)
    return clip(line[start:], width), max(wcswidth(line[start:col]), 0)


def draw_box(stdscr, y: int, x: int, width: int, title: str, rows, attr: int):
    """
    Draw a bordered box with a centered title and the given content rows.
    Returns the screen row of the first content line.
    """
    inner = width - 2
    title = f" {title} " if title else ""
    if title and len(title) < inner:
        title_start = (inner - len(title)) // 2
        top_line = "┌" + "─" * title_start + title + "─" * (inner - title_start - len(title)) + "┐"
    else:
        top_line = "┌" + "─" * inner + "┐"
    bottom_line = "└" + "─" * inner + "┘"

    safe_addstr(stdscr, y, x, top_line, attr | curses.A_BOLD)
    for i, row in enumerate(rows):
        safe_addstr(stdscr, y + 1 + i, x, "│" + pad_line(" " + row, inner) + "│", attr)
    safe_addstr(stdscr, y + 1 + len(rows), x, bottom_line, attr | curses.A_BOLD)
    return y + 1


def centered_box(stdscr, percent_x: int, title: str, rows, attr: int):
    """Draw a box centered on screen; returns (first content row, left x)."""
    height, width = stdscr.getmaxyx()
    box_width = max(20, min(width - 2, width * percent_x // 100))
    box_height = len(rows) + 2
    start_y = max(0, (height - box_height) // 2)
    start_x = max(0, (width - box_width) // 2)
    return draw_box(stdscr, start_y, start_x, box_width, title, rows, attr), start_x


###############################################################################
# HEADER, TEXT AREA, FOOTER
###############################################################################

def draw_header(session, stdscr, width: int):
    language = session.language
    try:
        curses.init_pair(PAIR_HEADER, curses.COLOR_BLACK, LANGUAGE_COLORS.get(language, DEFAULT_ACCENT))
    except curses.error:
        pass
    modified = " [+]" if session.is_modified else ""
    left = f"{APP_TITLE}  {session.filename}{modified}"
    right = f" {language} " if language else ""
    text = pad_line(left, width - len(right)) + right
    safe_addstr(stdscr, 0, 0, clip(text, width), curses.color_pair(PAIR_HEADER) | curses.A_BOLD)


def draw_text_area(session, stdscr, top: int, visible_height: int, width: int):
    """Draw the buffer lines and return the on-screen cursor position."""
    buf = session.buffer
    lines = buf.lines
    gutter = len(str(len(lines))) + 2
    text_width = max(1, width - gutter)

    if buf.cursor_line < buf.scroll:
        buf.scroll = buf.cursor_line
    if buf.cursor_line >= buf.scroll + visible_height:
        buf.scroll = buf.cursor_line - visible_height + 1
    buf.scroll = max(0, min(buf.scroll, max(0, len(lines) - 1)))

    current = lines[buf.cursor_line]
    col_offset = max(0, wcswidth(current[:buf.cursor_col]) - text_width + 1)

    for i in range(visible_height):
        line_index = buf.scroll + i
        if line_index >= len(lines):
            break
        number = f"{line_index + 1:>{gutter - 1}} "
        safe_addstr(stdscr, top + i, 0, number, curses.color_pair(PAIR_GUTTER))
        line = lines[line_index]
        visible = _skip_cells(line, col_offset)
        safe_addstr(stdscr, top + i, gutter, clip(visible, text_width), curses.color_pair(PAIR_TEXT))

    cursor_y = top + buf.cursor_line - buf.scroll
    cursor_x = gutter + max(wcswidth(current[:buf.cursor_col]), 0) - col_offset
    return cursor_y, cursor_x


def _skip_cells(text: str, cells: int) -> str:
    """Drop characters from the left of `text` until `cells` columns are skipped."""
    skipped = 0
    for i, ch in enumerate(text):
        if skipped >= cells:
            return text[i:]
        skipped += max(wcwidth(ch), 0)
    return ""


def draw_footer(session, stdscr, height: int, width: int):
    if session.status_message:
        safe_addstr(stdscr, height - 2, 0, pad_line(f" {session.status_message} ", width),
                    curses.color_pair(PAIR_STATUS) | curses.A_BOLD)
    x = 0
    y = height - 1
    # The bottom-right cell cannot be written without an error
    safe_addstr(stdscr, y, 0, " " * (width - 1), curses.color_pair(PAIR_FOOTER))
    for key, label in SHORTCUTS[session.mode]:
        if x >= width - 1:
            break
        if key:
            safe_addstr(stdscr, y, x, clip(key, width - 1 - x), curses.color_pair(PAIR_FOOTER) | curses.A_BOLD)
            x += len(key) + 1
        text = f"{label}  "
        if x < width - 1:
            safe_addstr(stdscr, y, x, clip(text, width - 1 - x), curses.color_pair(PAIR_FOOTER))
        x += len(text)


###############################################################################
# MODE OVERLAYS
###############################################################################

def draw_prompt_popup(session, stdscr):
    _, width = stdscr.getmaxyx()
    inner = max(1, max(20, min(width - 2, width * 60 // 100)) - 4)
    text, offset = field_view(session.prompt_input, inner)
    if not session.prompt_input.to_text():
        text = "Describe your wish (e.g., 'Refactor this function')..."
    y, x = centered_box(stdscr, 60, "AI Magic Prompt", ["", text, ""],
                        curses.color_pair(PAIR_POPUP))
    return y + 1, x + 2 + offset


def draw_setup_screen(session, stdscr):
    height, width = stdscr.getmaxyx()
    stdscr.erase()
    welcome = "Welcome to NeuroNano!"
    info = f"To start, please get an API Key from {API_KEY_URL}"
    start_y = max(0, height // 3)
    safe_addstr(stdscr, start_y, max(0, (width - wcswidth(welcome)) // 2), clip(welcome, width),
                curses.color_pair(PAIR_TEXT) | curses.A_BOLD)
    safe_addstr(stdscr, start_y + 1, max(0, (width - wcswidth(info)) // 2), clip(info, width),
                curses.color_pair(PAIR_TEXT))
    box_width = max(20, min(width - 2, 70))
    text, offset = field_view(session.setup_input, box_width - 4)
    if not session.setup_input.to_text():
        text = "Paste your Google Gemini API Key here..."
    box_x = max(0, (width - box_width) // 2)
    row = draw_box(stdscr, start_y + 3, box_x, box_width, "API Key", [text],
                   curses.color_pair(PAIR_POPUP))
    draw_footer(session, stdscr, height, width)
    return row, box_x + 2 + offset


def draw_processing_popup(session, stdscr):
    centered_box(stdscr, 40, "", ["", "NeuroNano is thinking...", ""],
                 curses.color_pair(PAIR_THINKING) | curses.A_BOLD)
    return None


def draw_search_bar(session, stdscr):
    height, width = stdscr.getmaxyx()
    text, offset = field_view(session.search_input, width - 4)
    y = max(1, height - 5)
    row = draw_box(stdscr, y, 0, width, "Search", [text], curses.color_pair(PAIR_POPUP))
    return row, 2 + offset


def draw_save_as_popup(session, stdscr):
    _, width = stdscr.getmaxyx()
    inner = max(1, max(20, min(width - 2, width * 50 // 100)) - 4)
    text, offset = field_view(session.filename_input, inner)
    y, x = centered_box(stdscr, 50, "Save As", [text], curses.color_pair(PAIR_POPUP))
    return y, x + 2 + offset


def draw_confirm_quit_popup(session, stdscr):
    rows = ["Unsaved Changes!", "Save before quitting?", "", "(Y)es / (N)o / (Esc) Cancel"]
    centered_box(stdscr, 40, "Warning", rows, curses.color_pair(PAIR_WARNING) | curses.A_BOLD)
    return None


OVERLAYS = {
    Mode.PROMPTING: draw_prompt_popup,
    Mode.SETUP: draw_setup_screen,
    Mode.PROCESSING: draw_processing_popup,
    Mode.SEARCH: draw_search_bar,
    Mode.SAVE_AS: draw_save_as_popup,
    Mode.CONFIRM_QUIT: draw_confirm_quit_popup,
}


def display(session, stdscr):
    """
    Re-draw the entire screen: header, text area, footer, and the overlay of the
    current mode (if any). The cursor is left in whichever field takes input.
    """
    height, width = stdscr.getmaxyx()
    stdscr.erase()
    if height < 4 or width < 10:
        safe_addstr(stdscr, 0, 0, clip("terminal too small", max(0, width - 1)))
        stdscr.refresh()
        return

    draw_header(session, stdscr, width)
    cursor = draw_text_area(session, stdscr, 1, height - 3, width)
    draw_footer(session, stdscr, height, width)

    overlay = OVERLAYS.get(session.mode)
    if overlay is not None:
        cursor = overlay(session, stdscr)

    try:
        if cursor is None:
            curses.curs_set(0)
        else:
            curses.curs_set(1)
            stdscr.move(*cursor)
    except curses.error:
        pass
    stdscr.refresh()
