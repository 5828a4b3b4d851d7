"""
Main entry point and driver loop for the NeuroNano editor.
"""
import curses
import sys

from neuronano import logger
from neuronano.errors import FatalTerminalError
from neuronano.session import Session
from neuronano.ui import input as keys, screen

# getch() waits at most this long, so finished AI results are picked up promptly
INPUT_TIMEOUT_MS = 100


def setup_terminal(stdscr):
    """Raw keys (so ^Q/^O reach us), keypad decoding, bounded input waits, colors."""
    try:
        curses.raw()
        stdscr.keypad(True)
        stdscr.timeout(INPUT_TIMEOUT_MS)
        screen.init_colors()
    except curses.error as exc:
        raise FatalTerminalError(f"cannot initialise terminal: {exc}") from exc
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        pass


def run_loop(session, stdscr):
    """
    Poll for a finished rewrite, redraw, read one key and route it, until the
    session asks to quit.
    """
    while not session.should_quit:
        session.poll_result()
        screen.display(session, stdscr)
        key = stdscr.getch()
        if key == -1:
            continue
        if key == curses.KEY_RESIZE:
            continue
        keys.handle_key(session, key)


def main(stdscr):
    setup_terminal(stdscr)

    # One optional positional argument: the file to edit
    filename = sys.argv[1] if len(sys.argv) > 1 else None
    session = Session(filename)
    logger.log(f"editor started (file: {session.filename}, mode: {session.mode.value})")
    try:
        run_loop(session, stdscr)
    finally:
        session.close()


def run() -> int:
    """
    Start the curses wrapper with main(). Returns the process exit code; a
    failure is printed to standard output once the terminal is restored.
    """
    try:
        curses.wrapper(main)
    except KeyboardInterrupt:
        return 0
    except Exception as err:
        logger.log(f"fatal: {err!r}")
        print(err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
