#!/usr/bin/env python3
"""
Unit tests for app.main when another instance is already running

A primary is started in-process on a temporary socket; main() then plays
the second launch against a seeded app directory.
"""

import os
import socket
import sys
import tempfile
import threading
import time
import unittest
from pathlib import Path
from unittest.mock import patch

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

try:
    import tkinter  # noqa: F401
    TK_AVAILABLE = True
except ImportError:
    TK_AVAILABLE = False

from todotray.single_instance import SingleInstance

SEEDED = '[\n  {\n    "text": "buy milk"\n  }\n]'.encode("utf-8")


@unittest.skipUnless(hasattr(socket, "AF_UNIX"), "requires UNIX domain sockets")
@unittest.skipUnless(TK_AVAILABLE, "requires tkinter")
class TestSecondLaunch(unittest.TestCase):
    """Test the hand-off path of main()"""

    def setUp(self):
        from todotray import app
        self.app_module = app

        self._tmp = tempfile.TemporaryDirectory(dir="/tmp" if os.path.isdir("/tmp") else None)
        self.base = Path(self._tmp.name)
        self.sock = self.base / "todo-app-test.sock"
        self.data = self.base / "todo.json"
        self.data.write_bytes(SEEDED)

        self.shows = 0
        self.lock = threading.Lock()
        self.primary = SingleInstance(self.sock, on_show=self._on_show)

        self.patches = [
            patch("todotray.app.app_dir", return_value=self.base),
            patch("todotray.single_instance.default_socket_path", return_value=self.sock),
        ]
        for p in self.patches:
            p.start()

    def tearDown(self):
        for p in self.patches:
            p.stop()
        self.primary.close()
        self._tmp.cleanup()

    def _on_show(self):
        with self.lock:
            self.shows += 1

    def _wait_for_shows(self, expected):
        for _ in range(50):
            if self.shows >= expected:
                break
            time.sleep(0.1)
        return self.shows

    def _run_main(self):
        with self.assertRaises(SystemExit) as cm:
            self.app_module.main()
        return cm.exception.code

    def test_second_launch_exits_zero_without_touching_data(self):
        self.primary.acquire()

        self.assertEqual(self._run_main(), 0)

        self.assertEqual(self._wait_for_shows(1), 1)
        self.assertEqual(self.data.read_bytes(), SEEDED)
        self.assertFalse((self.base / "tray.png").exists())

    def test_second_launch_ignores_unusable_log_directory(self):
        (self.base / "logs").write_text("not a directory", encoding="utf-8")
        self.primary.acquire()

        self.assertEqual(self._run_main(), 0)

        self.assertEqual(self._wait_for_shows(1), 1)
        self.assertTrue((self.base / "logs").is_file())

    def test_second_launches_keep_primary_log_directory(self):
        (self.base / "config.yaml").write_text("logging:\n  run_retention: 1\n", encoding="utf-8")
        primary_run = self.base / "logs" / "run-20260101-000000"
        primary_run.mkdir(parents=True)
        self.primary.acquire()

        self.assertEqual(self._run_main(), 0)
        self.assertEqual(self._run_main(), 0)

        self.assertEqual(self._wait_for_shows(2), 2)
        self.assertTrue(primary_run.is_dir())
        self.assertEqual(list((self.base / "logs").iterdir()), [primary_run])

    def test_bind_failure_exits_one(self):
        with patch(
            "todotray.single_instance.default_socket_path",
            return_value=self.base / "missing" / "app.sock",
        ):
            self.assertEqual(self._run_main(), 1)

        self.assertEqual(self.data.read_bytes(), SEEDED)


if __name__ == '__main__':
    unittest.main()
