"""
Logging setup shared by the library and BaseScript, the parent of every CLI
script under scripts/.

A script subclasses BaseScript, implements run() returning a JSON-safe dict,
and calls main() from its __main__ block:

    class InboxCount(BaseScript):
        def run(self) -> dict:
            count = self.nylas.messages.get_messages_list({"view": "count"})
            return {"unread": count}

    if __name__ == "__main__":
        InboxCount.main()

Log lines go to $NYLAS_OPS_LOG_DIR/<scriptname>.log (rotating) and stderr;
the "nylas_ops" library logger is routed to the same handlers, so request and
pool logging shows up beside the script's own lines. The JSON result is the
only thing written to stdout.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from abc import ABC, abstractmethod
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from .client import Client

LOGS_DIR = Path(os.environ.get("NYLAS_OPS_LOG_DIR", "~/.nylas_ops/logs")).expanduser()

LOG_FORMAT = logging.Formatter(
    "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_MAX_LOG_BYTES = 2_000_000
_LOG_BACKUPS = 5


def add_file_handler(logger: logging.Logger, path: Union[str, Path]) -> RotatingFileHandler:
    """
    Attach a rotating file handler (2 MB x 5 backups) to `logger`.

    Attaching the same path twice returns the existing handler.
    """
    target = Path(path).expanduser().resolve()
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == target:
            return handler

    target.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        target, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(LOG_FORMAT)
    logger.addHandler(handler)
    return handler


class BaseScript(ABC):
    """
    One Nylas automation: logging, a lazily opened Client, JSON output.

    Pass `client` to reuse an existing Client (tests do); otherwise one is
    built from the environment on first use of `self.nylas` and closed by
    close().
    """

    def __init__(self, log_level: int = logging.INFO, client: Optional["Client"] = None) -> None:
        self.script_name: str = type(self).__name__.lower()
        self.logger: logging.Logger = self._setup_logger(log_level)
        self._client = client
        self._owns_client = client is None

    # ── Logging ───────────────────────────────────────────────────────────────

    def _setup_logger(self, log_level: int) -> logging.Logger:
        logger = logging.getLogger(self.script_name)
        library = logging.getLogger("nylas_ops")
        for target in (logger, library):
            target.setLevel(log_level)

        # Handlers survive across instances of the same script class
        if logger.handlers:
            return logger

        handlers: list[logging.Handler] = [
            add_file_handler(logger, LOGS_DIR / f"{self.script_name}.log"),
        ]
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(LOG_FORMAT)
        logger.addHandler(console)
        handlers.append(console)

        for handler in handlers:
            if handler not in library.handlers:
                library.addHandler(handler)
        return logger

    # ── Nylas client ──────────────────────────────────────────────────────────

    @property
    def nylas(self) -> "Client":
        if self._client is None:
            from .client import Client

            self._client = Client()
        return self._client

    def close(self) -> None:
        """Close the Client if this script opened it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    @abstractmethod
    def run(self) -> dict[str, Any]:
        """Do the work; the returned dict is printed as JSON (default=str)."""

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        """Parser with the shared --debug flag; subclasses add their own args."""
        summary = (cls.__doc__ or cls.__name__).strip().splitlines()[0]
        parser = argparse.ArgumentParser(description=summary)
        parser.add_argument(
            "--debug", action="store_true", help="Log at DEBUG level"
        )
        return parser

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "BaseScript":
        """Instantiate from parsed args. Override when __init__ takes more."""
        return cls(log_level=logging.DEBUG if args.debug else logging.INFO)

    @classmethod
    def main(cls) -> None:
        """Parse argv, run once, print the result; failures are logged and re-raised."""
        script = cls.from_args(cls.build_parser().parse_args())

        started = time.monotonic()
        try:
            result = script.run()
        except Exception:
            script.logger.exception(
                "%s failed after %.2fs", script.script_name, time.monotonic() - started
            )
            raise
        finally:
            script.close()

        script.logger.info("Finished in %.2fs", time.monotonic() - started)
        print(json.dumps(result, indent=2, default=str))
