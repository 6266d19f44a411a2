"""Operator-facing output and confirmation prompts.

Status lines and prompts go to stdout so they stay readable next to the
diagnostic logging, which goes to stderr.
"""
import sys
from typing import IO, Optional


class Logger:
    def __init__(self, writer: Optional[IO[str]] = None, reader: Optional[IO[str]] = None,
                 no_confirm: bool = False):
        self.writer = writer if writer is not None else sys.stdout
        self.reader = reader if reader is not None else sys.stdin
        self._no_confirm = no_confirm

    def no_confirm(self):
        """Stop asking; every later prompt answers yes."""
        self._no_confirm = True

    def prompt(self, message: str) -> bool:
        if self._no_confirm:
            return True

        self.writer.write(f"{message} (y/N): ")
        self.writer.flush()
        answer = self.reader.readline()

        return answer.strip().lower() in ('y', 'yes')

    def printf(self, message: str, *args):
        self.writer.write(message % args if args else message)
        self.writer.flush()

    def println(self, message: str):
        self.printf(f"{message}\n")
