"""
Session state for the NeuroNano editor.

The Session owns the text buffer, the four small input fields, the current mode,
the dirty flag and the status message. It implements every action the key
router can trigger: saving, the quit confirmation flow, the API key setup, search,
and the AI rewrite protocol.

AI rewrite protocol: dispatch_rewrite() snapshots everything the request needs
and hands a job to the background loop; the job only talks back through a
one-slot queue. The curses loop calls poll_result() once per iteration, which
applies a delivered result to the buffer exactly once and leaves PROCESSING.
"""
import enum
import queue
from dataclasses import dataclass

from neuronano import ai, logger
from neuronano.buffer import Buffer
from neuronano.config import Config, ConfigStore
from neuronano.errors import AiRequestError, ConfigError, InvalidTransition, NoFilename, SaveError
from neuronano.language import detect_language
from neuronano.worker import BackgroundLoop

UNNAMED = "[No Name]"


class Mode(enum.Enum):
    NORMAL = "normal"
    PROMPTING = "prompting"
    SETUP = "setup"
    PROCESSING = "processing"
    SEARCH = "search"
    SAVE_AS = "save_as"
    CONFIRM_QUIT = "confirm_quit"


# Every mode change the editor may make. Quitting is not a mode change.
TRANSITIONS = {
    Mode.NORMAL: {Mode.PROMPTING, Mode.SEARCH, Mode.SAVE_AS, Mode.CONFIRM_QUIT},
    Mode.PROMPTING: {Mode.NORMAL, Mode.PROCESSING},
    Mode.SETUP: {Mode.NORMAL},
    Mode.PROCESSING: {Mode.NORMAL},
    Mode.SEARCH: {Mode.NORMAL},
    Mode.SAVE_AS: {Mode.NORMAL},
    Mode.CONFIRM_QUIT: {Mode.NORMAL, Mode.SAVE_AS},
}


@dataclass(frozen=True)
class RewriteRequest:
    """Snapshot of everything one AI rewrite needs, taken at dispatch time."""
    api_key: str
    code: str
    filename: str
    instruction: str


async def run_rewrite(rewrite, request: RewriteRequest, results: queue.Queue):
    """
    Background job: call the model and put the outcome into `results`.
    Failures are delivered as "Error: ..." text, which ends up in the buffer.
    """
    try:
        text = await rewrite(request.api_key, request.code, request.filename, request.instruction)
    except AiRequestError as exc:
        logger.log(f"ai request failed: {exc}")
        text = f"Error: {exc}"
    except Exception as exc:
        # The session waits in PROCESSING until something arrives, so every
        # failure has to be delivered.
        logger.log(f"ai task crashed: {exc!r}")
        text = f"Error: {exc}"
    try:
        results.put_nowait(text)
    except queue.Full:
        logger.log("ai result dropped: a result is already pending.")


class Session:
    """
    Holds the state of one editing session and the actions that change it.
    Only the curses loop thread touches a Session.
    """
    def __init__(self, filename=None, config_store=None, rewrite=None, engine=None):
        self.buffer = Buffer()

        # Auxiliary input fields, one per mode that takes text
        self.prompt_input = Buffer()
        self.setup_input = Buffer()
        self.search_input = Buffer()
        self.filename_input = Buffer()

        self.filename = filename or UNNAMED
        self.is_modified = False
        self.status_message = None

        self.config_store = config_store if config_store is not None else ConfigStore()
        self.config = self.config_store.load()

        self.rewrite = rewrite or ai.rewrite
        self.engine = engine if engine is not None else BackgroundLoop()
        # One-slot result channel; only the single dispatched job sends on it
        self.results = queue.Queue(maxsize=1)

        self.should_quit = False
        # Set when "save before quitting?" had to ask for a filename first
        self.quit_after_save = False

        self.mode = Mode.NORMAL if self.config.api_key else Mode.SETUP

        if filename:
            self.load_file(filename)

    @property
    def is_unnamed(self) -> bool:
        return not self.filename or self.filename == UNNAMED

    @property
    def language(self):
        if self.is_unnamed:
            return None
        return detect_language(self.filename)

    def load_file(self, path: str):
        """Load `path` into the buffer; a missing file starts an empty buffer."""
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except FileNotFoundError:
            self.status_message = f"new file: {path}"
            logger.log(f"new file: {path}")
        except (OSError, UnicodeDecodeError) as e:
            self.status_message = f"error opening file: {e}"
            logger.log(f"error opening {path}: {e}")
        else:
            self.buffer = Buffer.from_text(content)
            logger.log(f"opened {path} ({len(self.buffer.lines)} lines)")

    ##########################################
    # MODES
    ##########################################
    def set_mode(self, mode: Mode):
        """Switch to `mode`, refusing changes missing from TRANSITIONS."""
        if mode not in TRANSITIONS[self.mode]:
            raise InvalidTransition(self.mode, mode)
        self.mode = mode

    def quit(self):
        """Ask the driver loop to exit after this iteration."""
        logger.log("editor exited.")
        self.should_quit = True

    def request_quit(self):
        """Quit right away, or ask first when there are unsaved changes."""
        if self.is_modified:
            self.set_mode(Mode.CONFIRM_QUIT)
        else:
            self.quit()

    def confirm_quit(self, save: bool):
        """Answer to the unsaved-changes question."""
        if not save:
            logger.log("quit without saving.")
            self.quit()
            return
        if self.is_unnamed:
            self.quit_after_save = True
            self.prompt_save_as()
            return
        if self.try_save():
            self.quit()
        else:
            self.set_mode(Mode.NORMAL)

    ##########################################
    # EDITING & PERSISTENCE
    ##########################################
    def mark_dirty(self):
        self.is_modified = True
        self.status_message = None

    def edit_buffer(self, key: int):
        if self.buffer.edit(key):
            self.mark_dirty()

    def cut(self):
        if self.buffer.cut():
            self.mark_dirty()

    def paste(self):
        if self.buffer.paste():
            self.mark_dirty()

    def save_to_disk(self):
        """
        Write the buffer to self.filename, replacing the file's contents.
        Raises NoFilename when there is no backing file; OSError from the write
        propagates unchanged. is_modified is only cleared on success.
        """
        if self.is_unnamed:
            raise NoFilename()
        content = self.buffer.to_text()
        with open(self.filename, 'w', encoding='utf-8') as f:
            f.write(content)
        self.is_modified = False
        num_bytes = len(content.encode('utf-8'))
        self.status_message = f"saved {self.filename} ({num_bytes} bytes)"
        logger.log(f"saved {self.filename} ({num_bytes} bytes)")

    def try_save(self) -> bool:
        """save_to_disk() with any failure shown as the status message."""
        try:
            self.save_to_disk()
        except (SaveError, OSError) as e:
            self.status_message = f"error saving file: {e}"
            logger.log(f"error saving {self.filename}: {e}")
            return False
        return True

    def save(self):
        """The save shortcut: write a named buffer, ask for a name otherwise."""
        if self.is_unnamed:
            self.prompt_save_as()
        else:
            self.try_save()

    def prompt_save_as(self):
        self.filename_input.set_text("" if self.is_unnamed else self.filename)
        self.set_mode(Mode.SAVE_AS)

    def confirm_save_as(self):
        name = self.filename_input.first_line().strip()
        if not name:
            self.status_message = "filename cannot be empty."
            return
        self.filename = name
        saved = self.try_save()
        self.set_mode(Mode.NORMAL)
        if saved and self.quit_after_save:
            self.quit()
        self.quit_after_save = False

    def cancel_save_as(self):
        self.quit_after_save = False
        self.set_mode(Mode.NORMAL)

    ##########################################
    # SETUP
    ##########################################
    def save_api_key(self):
        """Persist the key typed in the setup field; leave setup only if that worked."""
        key = self.setup_input.first_line().strip()
        if not key:
            self.status_message = "api key cannot be empty."
            return
        config = Config(api_key=key)
        try:
            self.config_store.save(config)
        except ConfigError as e:
            self.status_message = f"failed to save config: {e}"
            logger.log(f"failed to save config: {e}")
            return
        self.config = config
        self.set_mode(Mode.NORMAL)
        self.status_message = "api key saved."
        logger.log(f"api key saved to {self.config_store.path}")

    ##########################################
    # SEARCH
    ##########################################
    def find(self, query: str):
        """Return (line, col) of the first occurrence of `query`, or None."""
        for i, line in enumerate(self.buffer.lines):
            col = line.find(query)
            if col != -1:
                return i, col
        return None

    def search(self):
        """Jump to the first match of the search field's query and leave search mode."""
        query = self.search_input.first_line()
        if query:
            match = self.find(query)
            if match is None:
                self.status_message = f"no matches for '{query}'."
            else:
                self.buffer.move_cursor_to(*match)
        self.set_mode(Mode.NORMAL)

    ##########################################
    # AI REWRITE
    ##########################################
    def dispatch_rewrite(self):
        """
        Start an AI rewrite of the whole buffer in the background.
        Only allowed from PROMPTING, so a second request can never be issued
        while one is in flight.
        """
        if self.mode is not Mode.PROMPTING:
            raise InvalidTransition(self.mode, Mode.PROCESSING)
        request = RewriteRequest(
            api_key=self.config.api_key,
            code=self.buffer.to_text(),
            filename=self.filename,
            instruction=self.prompt_input.to_text(),
        )
        self.set_mode(Mode.PROCESSING)
        logger.log(f"ai rewrite dispatched for {self.filename}: {request.instruction!r}")
        self.engine.submit(run_rewrite(self.rewrite, request, self.results))

    def poll_result(self) -> bool:
        """
        Apply a finished rewrite, if one is waiting. Never blocks.
        Returns True when the buffer was replaced.
        """
        try:
            text = self.results.get_nowait()
        except queue.Empty:
            return False
        self.buffer.replace_all(text)
        if self.mode is Mode.PROCESSING:
            self.set_mode(Mode.NORMAL)
        self.mark_dirty()
        logger.log(f"ai rewrite applied ({len(self.buffer.lines)} lines)")
        return True

    def close(self):
        """Stop the background loop; an unfinished rewrite is abandoned."""
        self.engine.stop()
