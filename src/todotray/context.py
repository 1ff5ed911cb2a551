#!/usr/bin/env python3
"""
Application context
Owns the to-do list and funnels every mutation through the UI thread
"""

import logging
from typing import Callable, List, NamedTuple, Optional

from todotray.dispatch import UiDispatcher
from todotray.store import Todo, TodoStore
from todotray.textwidth import truncate

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "(no to-dos)"
ROW_PREFIX = "☐ "


class MenuRow(NamedTuple):
    """One to-do row of the tray menu"""
    label: str
    todo_id: Optional[str]
    enabled: bool


class TodoApp:
    """In-memory to-do list plus the hooks the GUI hangs off it"""

    def __init__(self, store: TodoStore, dispatcher: UiDispatcher, max_label_weight: int = 40):
        """
        Create an empty context; call load() to read the persisted list

        Args:
            store: Where the list is persisted after every mutation
            dispatcher: Queue drained on the UI thread
            max_label_weight: Weight budget of a tray menu label
        """
        self.store = store
        self.dispatcher = dispatcher
        self.max_label_weight = max_label_weight
        self.todos: List[Todo] = []

        self.change_callbacks: List[Callable[[], None]] = []
        self.show_callbacks: List[Callable[[], None]] = []

    def load(self):
        """Read the persisted list; done only once this process is the primary"""
        self.todos = self.store.load()
        logger.info(f"Loaded {len(self.todos)} todo(s) from {self.store.path}")

    def subscribe(self, callback: Callable[[], None]):
        """Register a callback run after every mutation"""
        self.change_callbacks.append(callback)

    def on_show(self, callback: Callable[[], None]):
        """Register a callback run when the entry window is requested"""
        self.show_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Thread-safe entry points
    # ------------------------------------------------------------------
    def apply(self, fn: Callable, *args):
        """Queue ``fn`` to run on the UI thread"""
        self.dispatcher.post(fn, *args)

    def request_show(self):
        """Ask the UI thread to bring the entry window forward"""
        self.apply(self._notify_show)

    # ------------------------------------------------------------------
    # Mutations (UI thread only)
    # ------------------------------------------------------------------
    def add(self, text: str) -> Optional[Todo]:
        """Append a to-do. Empty text is ignored."""
        if not text:
            return None

        todo = Todo(text)
        self.todos.append(todo)
        self._commit()
        logger.info(f"Added todo: {text!r}")
        return todo

    def delete(self, todo_id: str) -> bool:
        """Remove the to-do with the given id"""
        for index, todo in enumerate(self.todos):
            if todo.id == todo_id:
                del self.todos[index]
                self._commit()
                logger.info(f"Deleted todo: {todo.text!r}")
                return True

        logger.warning(f"No todo with id {todo_id}")
        return False

    def delete_text(self, text: str) -> bool:
        """Remove the first to-do whose text equals ``text``"""
        for todo in self.todos:
            if todo.text == text:
                return self.delete(todo.id)
        return False

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def texts(self) -> List[str]:
        return [todo.text for todo in self.todos]

    def menu_rows(self) -> List[MenuRow]:
        """Rows shown between the tray menu separators"""
        if not self.todos:
            return [MenuRow(EMPTY_PLACEHOLDER, None, False)]

        return [
            MenuRow(
                ROW_PREFIX + truncate(todo.text, self.max_label_weight, with_ellipsis=True),
                todo.id,
                True,
            )
            for todo in self.todos
        ]

    def _commit(self):
        self.store.save(self.todos)
        for callback in self.change_callbacks:
            callback()

    def _notify_show(self):
        for callback in self.show_callbacks:
            callback()
