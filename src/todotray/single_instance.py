"""Single-instance guard over a per-user UNIX socket.

The first process to start binds the socket and becomes the primary. Any
later launch connects, writes ``show`` and exits, which asks the primary to
bring its entry window forward.
"""

from __future__ import annotations

import atexit
import getpass
import logging
import os
import socket
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


logger = logging.getLogger(__name__)

SHOW_MESSAGE = "show"
_SOCKET_PREFIX = "todo-app"


class InstanceRole(str, Enum):
    """Outcome of probing the instance socket."""

    PROBING = "probing"
    PRIMARY = "primary"
    SECONDARY = "secondary"


class SingleInstanceError(RuntimeError):
    """Raised when the socket cannot be bound or the primary cannot be signalled."""


def default_socket_path() -> Path:
    """Per-user socket path in the shared temporary directory."""

    try:
        username = getpass.getuser()
    except Exception:  # KeyError, OSError or ImportError depending on platform
        username = ""

    name = f"{_SOCKET_PREFIX}-{username}.sock" if username else f"{_SOCKET_PREFIX}.sock"
    return Path(tempfile.gettempdir()) / name


def notify_existing(socket_path: Path | str) -> bool:
    """Send ``show`` to a running primary.

    Returns False when nobody is listening. Raises ``SingleInstanceError`` if
    the connection succeeded but the message could not be written.
    """

    client = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        try:
            client.connect(str(socket_path))
        except OSError:
            return False

        try:
            client.sendall(f"{SHOW_MESSAGE}\n".encode("ascii"))
        except OSError as exc:
            raise SingleInstanceError(
                f"failed to send signal to existing instance: {exc}"
            ) from exc
    finally:
        client.close()

    return True


class SingleInstance:
    """Probe-then-listen coordinator for the primary/secondary handshake."""

    def __init__(
        self,
        socket_path: Path | str | None = None,
        on_show: Optional[Callable[[], None]] = None,
    ) -> None:
        self.socket_path = Path(socket_path) if socket_path else default_socket_path()
        self.on_show = on_show
        self.role = InstanceRole.PROBING

        self._listener: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._closed = threading.Event()

    def acquire(self) -> InstanceRole:
        """Decide whether this process is the primary or a secondary launch."""

        if notify_existing(self.socket_path):
            logger.info(
                "Another instance is already running. Signaled it to show the window."
            )
            self.role = InstanceRole.SECONDARY
            return self.role

        self._listen()
        self.role = InstanceRole.PRIMARY
        return self.role

    def close(self) -> None:
        """Stop accepting and remove the socket file. Safe to call twice."""

        if self._closed.is_set():
            return
        self._closed.set()

        if self._listener is not None:
            try:
                # wakes the blocked accept() on Linux
                self._listener.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            try:
                self._listener.close()
            except OSError as exc:
                logger.debug("Error closing socket listener: %s", exc)
            self._listener = None

            try:
                os.unlink(self.socket_path)
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not remove socket file %s: %s", self.socket_path, exc)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _listen(self) -> None:
        try:
            os.unlink(self.socket_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove stale socket %s: %s", self.socket_path, exc)

        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(str(self.socket_path))
            listener.listen()
        except OSError as exc:
            listener.close()
            raise SingleInstanceError(
                f"failed to create socket listener at {self.socket_path}: {exc}"
            ) from exc

        self._listener = listener
        atexit.register(self.close)

        self._thread = threading.Thread(
            target=self._accept_loop,
            args=(listener,),
            name="SingleInstanceListener",
            daemon=True,
        )
        self._thread.start()
        logger.info("Socket listener started at %s", self.socket_path)

    def _accept_loop(self, listener: socket.socket) -> None:
        while not self._closed.is_set():
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                if self._closed.is_set():
                    break
                logger.warning("Socket accept error: %s", exc)
                continue

            threading.Thread(
                target=self._handle_connection,
                args=(conn,),
                name="SingleInstanceConnection",
                daemon=True,
            ).start()

        logger.debug("Socket listener stopped")

    def _handle_connection(self, conn: socket.socket) -> None:
        with conn:
            try:
                with conn.makefile("r", encoding="ascii", errors="replace") as reader:
                    line = reader.readline()
            except OSError as exc:
                logger.warning("Failed to read from socket: %s", exc)
                return

        if not line.endswith("\n"):
            logger.warning("Ignoring incomplete message from new instance: %r", line)
            return

        message = line.strip()
        logger.info("Received signal from new instance: %s", message)

        if message == SHOW_MESSAGE:
            if self.on_show is not None:
                self.on_show()
        else:
            logger.warning("Ignoring unknown message: %r", message)
