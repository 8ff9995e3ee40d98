"""Coloured status lines for the command line"""

import sys


class Colors:
    """ANSI color codes for terminal output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'


class Display:
    def __init__(self, use_colors=True, quiet=False, stream=None, err_stream=None):
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr
        self.use_colors = use_colors and self._supports_color()
        self.quiet = quiet

    def _supports_color(self):
        """Check if terminal supports colors"""
        return hasattr(self.stream, 'isatty') and self.stream.isatty()

    def _color(self, text, color):
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _emit(self, symbol, color, message, stream=None):
        print(f"{self._color(symbol, color)} {message}", file=stream or self.stream)

    def line(self, message=""):
        if not self.quiet:
            print(message, file=self.stream)

    def success(self, message):
        if not self.quiet:
            self._emit('✓', Colors.BRIGHT_GREEN, message)

    def info(self, message):
        if not self.quiet:
            self._emit('ℹ', Colors.BRIGHT_BLUE, message)

    def warning(self, message):
        if not self.quiet:
            self._emit('⚠', Colors.BRIGHT_YELLOW, message)

    def error(self, message):
        # Errors are shown even in quiet mode
        self._emit('✗', Colors.BRIGHT_RED, message, self.err_stream)
