#!/usr/bin/env python3
"""
Unit tests for the application context (list mutations and tray rows)
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from todotray.context import EMPTY_PLACEHOLDER, ROW_PREFIX, MenuRow, TodoApp
from todotray.dispatch import UiDispatcher
from todotray.store import Todo, TodoStore
from todotray.textwidth import ELLIPSIS


class TestTodoApp(unittest.TestCase):
    """Test TodoApp against a real store in a temporary directory"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "todo.json"
        self.store = TodoStore(self.path)
        self.dispatcher = UiDispatcher()
        self.app = TodoApp(self.store, self.dispatcher, max_label_weight=10)
        self.changes = []
        self.app.subscribe(lambda: self.changes.append(self.app.texts()))

    def tearDown(self):
        self._tmp.cleanup()

    def _persisted(self):
        return json.loads(self.path.read_text(encoding="utf-8"))

    def test_load_reads_store(self):
        self.store.save([Todo("a"), Todo("b")])
        self.app.load()
        self.assertEqual(self.app.texts(), ["a", "b"])

    def test_add_to_empty_store(self):
        self.app.load()
        self.assertEqual(self.app.menu_rows(), [MenuRow(EMPTY_PLACEHOLDER, None, False)])

        todo = self.app.add("buy milk")

        self.assertIsNotNone(todo)
        self.assertEqual(self._persisted(), [{"text": "buy milk"}])
        rows = self.app.menu_rows()
        self.assertEqual(len(rows), 1)
        self.assertTrue(rows[0].enabled)
        self.assertEqual(rows[0].todo_id, todo.id)
        self.assertNotIn(EMPTY_PLACEHOLDER, [row.label for row in rows])
        self.assertEqual(self.changes, [["buy milk"]])

    def test_empty_text_is_ignored(self):
        self.assertIsNone(self.app.add(""))
        self.assertEqual(self.app.texts(), [])
        self.assertFalse(self.path.exists())
        self.assertEqual(self.changes, [])

    def test_whitespace_text_is_stored_as_typed(self):
        self.assertIsNotNone(self.app.add("   "))
        self.assertEqual(self._persisted(), [{"text": "   "}])

    def test_delete_text_removes_first_match(self):
        for text in ("a", "b", "a"):
            self.app.add(text)

        self.assertTrue(self.app.delete_text("a"))

        self.assertEqual(self.app.texts(), ["b", "a"])
        self.assertEqual(self._persisted(), [{"text": "b"}, {"text": "a"}])

    def test_delete_by_id_distinguishes_duplicates(self):
        self.app.add("a")
        self.app.add("b")
        second_a = self.app.add("a")

        self.assertTrue(self.app.delete(second_a.id))
        self.assertEqual(self.app.texts(), ["a", "b"])

    def test_delete_unknown_is_noop(self):
        self.app.add("a")
        self.changes.clear()

        self.assertFalse(self.app.delete("missing"))
        self.assertFalse(self.app.delete_text("zzz"))
        self.assertEqual(self.app.texts(), ["a"])
        self.assertEqual(self.changes, [])

    def test_menu_rows_truncate_labels(self):
        self.app.add("short")
        self.app.add("this label is far too long")
        self.app.add("中文中文中文")

        labels = [row.label for row in self.app.menu_rows()]
        self.assertEqual(labels, [
            ROW_PREFIX + "short",
            ROW_PREFIX + "this label" + ELLIPSIS,
            ROW_PREFIX + "中文中文中" + ELLIPSIS,
        ])

    def test_apply_defers_until_drain(self):
        self.app.apply(self.app.add, "later")
        self.assertEqual(self.app.texts(), [])

        self.dispatcher.drain()
        self.assertEqual(self.app.texts(), ["later"])

    def test_request_show_runs_on_drain(self):
        shown = []
        self.app.on_show(lambda: shown.append(True))

        self.app.request_show()
        self.assertEqual(shown, [])

        self.dispatcher.drain()
        self.assertEqual(shown, [True])


if __name__ == '__main__':
    unittest.main()
