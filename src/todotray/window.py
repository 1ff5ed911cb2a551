#!/usr/bin/env python3
"""
Entry window for new to-dos
A single text field with a remaining-weight counter and a status hint
"""

import tkinter as tk
from typing import Callable, Optional

from todotray.textwidth import truncate, weight

HINT_TEXT = "Press Enter to submit"
SUCCESS_TEXT = "✓ To-do added"
HINT_COLOR = "#969696"
SUCCESS_COLOR = "#32CD32"
COUNTER_COLOR = "#808080"


class EntryWindow:
    """Hide-on-close window used to type new to-dos"""

    def __init__(
        self,
        root: tk.Tk,
        on_submit: Callable[[str], bool],
        max_weight: int = 40,
        title: str = "New to-do",
        width: int = 320,
        height: int = 85,
        status_revert_ms: int = 2000,
    ):
        """
        Build the widgets on ``root``

        Args:
            root: Tk root, owned by the caller and never destroyed here
            on_submit: Called with the entry text; returns True when a to-do was added
            max_weight: Weight budget of the entry text
            status_revert_ms: Delay before the success hint reverts
        """
        self.root = root
        self.on_submit = on_submit
        self.max_weight = max_weight
        self.status_revert_ms = status_revert_ms
        self._revert_job: Optional[str] = None

        root.title(title)
        root.geometry(f"{width}x{height}")
        root.resizable(False, False)
        root.protocol("WM_DELETE_WINDOW", self.hide)

        frame = tk.Frame(root, padx=8, pady=8)
        frame.pack(fill=tk.BOTH, expand=True)

        self.text_var = tk.StringVar()
        self.entry = tk.Entry(frame, textvariable=self.text_var)
        self.entry.pack(fill=tk.X)
        self.entry.bind("<Return>", self._on_return)

        bottom = tk.Frame(frame)
        bottom.pack(fill=tk.X, side=tk.BOTTOM)

        self.counter = tk.Label(bottom, fg=COUNTER_COLOR, font=("TkDefaultFont", 8))
        self.counter.pack(side=tk.LEFT)

        self.status = tk.Label(bottom, text=HINT_TEXT, fg=HINT_COLOR, font=("TkDefaultFont", 8))
        self.status.pack(side=tk.RIGHT)

        self.text_var.trace_add("write", self._on_changed)
        self._update_counter("")

        # Start hidden; the tray menu or a second launch shows it
        root.withdraw()

    def show(self):
        """Bring the window forward and focus the entry"""
        self.root.deiconify()
        self.root.lift()
        self.root.after(10, self.entry.focus_force)

    def hide(self):
        self.root.withdraw()

    def _on_changed(self, *_):
        text = self.text_var.get()
        if weight(text) > self.max_weight:
            # Setting the var re-enters this callback with the clamped text
            self.text_var.set(truncate(text, self.max_weight))
            self.entry.icursor(tk.END)
            return
        self._update_counter(text)

    def _update_counter(self, text: str):
        self.counter.config(text=f"Remaining: {self.max_weight - weight(text)}")

    def _on_return(self, _event=None):
        text = self.text_var.get()
        if not text:
            return
        if self.on_submit(text):
            self.text_var.set("")
            self._show_success()

    def _show_success(self):
        self.status.config(text=SUCCESS_TEXT, fg=SUCCESS_COLOR)
        if self._revert_job is not None:
            self.root.after_cancel(self._revert_job)
        self._revert_job = self.root.after(self.status_revert_ms, self._revert_status)

    def _revert_status(self):
        self._revert_job = None
        self.status.config(text=HINT_TEXT, fg=HINT_COLOR)
