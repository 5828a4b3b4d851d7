"""
Input handling for the NeuroNano editor.

Routes each key code to the handler of the session's current mode. Every mode
has exactly one handler, and keys a handler does not bind go to the text field
that mode owns.
"""
import curses

from neuronano.session import Mode


def ctrl(ch: str) -> int:
    """Key code produced by Ctrl+<ch>."""
    return ord(ch) & 0x1f


KEY_ESC = 27
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)

QUIT_KEYS = (ctrl('x'), ctrl('q'))
KEY_PROMPT = ctrl('p')
KEY_CUT = ctrl('k')
KEY_PASTE = ctrl('u')
KEY_SAVE = ctrl('o')
KEY_SEARCH = ctrl('f')


def handle_normal_mode(session, key: int):
    """Handle a key press while editing the buffer."""
    if key in QUIT_KEYS:
        session.request_quit()
    elif key == KEY_PROMPT:
        session.set_mode(Mode.PROMPTING)
    elif key == KEY_CUT:
        session.cut()
    elif key == KEY_PASTE:
        session.paste()
    elif key == KEY_SAVE:
        session.save()
    elif key == KEY_SEARCH:
        session.set_mode(Mode.SEARCH)
    else:
        session.edit_buffer(key)


def handle_prompting_mode(session, key: int):
    """Handle a key press in the AI instruction box."""
    if key == KEY_ESC:
        session.set_mode(Mode.NORMAL)
    elif key in ENTER_KEYS:
        session.dispatch_rewrite()
    else:
        session.prompt_input.edit(key)


def handle_setup_mode(session, key: int):
    """Handle a key press on the API key setup screen."""
    if key == KEY_ESC or key in QUIT_KEYS:
        session.quit()
    elif key in ENTER_KEYS:
        session.save_api_key()
    else:
        session.setup_input.edit(key)


def handle_processing_mode(session, key: int):
    """While a rewrite is running only the quit keys do anything."""
    if key in QUIT_KEYS:
        session.quit()


def handle_search_mode(session, key: int):
    """Handle a key press in the search bar."""
    if key == KEY_ESC:
        session.set_mode(Mode.NORMAL)
    elif key in ENTER_KEYS:
        session.search()
    else:
        session.search_input.edit(key)


def handle_save_as_mode(session, key: int):
    """Handle a key press in the save-as filename box."""
    if key == KEY_ESC:
        session.cancel_save_as()
    elif key in ENTER_KEYS:
        session.confirm_save_as()
    else:
        session.filename_input.edit(key)


def handle_confirm_quit_mode(session, key: int):
    """Handle the answer to 'save before quitting?'."""
    if key in (ord('y'), ord('Y')):
        session.confirm_quit(True)
    elif key in (ord('n'), ord('N')):
        session.confirm_quit(False)
    elif key == KEY_ESC:
        session.set_mode(Mode.NORMAL)


MODE_HANDLERS = {
    Mode.NORMAL: handle_normal_mode,
    Mode.PROMPTING: handle_prompting_mode,
    Mode.SETUP: handle_setup_mode,
    Mode.PROCESSING: handle_processing_mode,
    Mode.SEARCH: handle_search_mode,
    Mode.SAVE_AS: handle_save_as_mode,
    Mode.CONFIRM_QUIT: handle_confirm_quit_mode,
}


def handle_key(session, key: int):
    """Dispatch one key code to the handler of the current mode."""
    MODE_HANDLERS[session.mode](session, key)
