"""Terminal mirror of the published frames (cosmetic only)"""
import sys

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class ConsoleMirror:
    def __init__(self, stream=None, clear: bool = True):
        self._stream = stream if stream is not None else sys.stdout
        self._clear = clear

    def show_frame(self, json_text: str, human_text: str):
        out = CLEAR_SCREEN if self._clear else ""
        out += json_text + "\n\n" + human_text
        self._stream.write(out)
        self._stream.flush()

    def show_status(self, state: str, detail: str = ""):
        line = f"state: {state}"
        if detail:
            line += f" ({detail})"
        self._stream.write(line + "\n")
        self._stream.flush()
