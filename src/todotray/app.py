#!/usr/bin/env python3
"""
todotray application entry point
Single-instance check, then the tkinter loop with the tray icon beside it
"""

import logging
import sys
import tkinter as tk
from pathlib import Path

from PIL import Image

from todotray.config import CONFIG_FILE_NAME, app_dir, load_config, resolve_path
from todotray.context import TodoApp
from todotray.dispatch import UiDispatcher
from todotray.icon import create_icon_image, ensure_icon
from todotray.logging_setup import bootstrap_logging
from todotray.single_instance import InstanceRole, SingleInstance, SingleInstanceError
from todotray.store import TodoStore

logger = logging.getLogger(__name__)

DISPATCH_INTERVAL_MS = 50


class TodoTrayApplication:
    """Wires the to-do context to the entry window and the tray icon"""

    def __init__(self, config: dict, base_dir: Path):
        self.config = config
        self.base_dir = base_dir

        todo_cfg = config['todo']
        self.dispatcher = UiDispatcher()
        self.app = TodoApp(
            TodoStore(resolve_path(base_dir, todo_cfg['data_file'])),
            self.dispatcher,
            max_label_weight=int(todo_cfg['max_label_weight']),
        )
        self.instance = SingleInstance(on_show=self.app.request_show)

        self.root = None
        self.window = None
        self.tray = None
        self.running = False

    def load_tray_image(self) -> Image.Image:
        """Load the icon file, falling back to the in-memory glyph"""
        icon_path = ensure_icon(resolve_path(self.base_dir, self.config['todo']['icon_file']))
        if not icon_path:
            logger.warning("Could not find or create tray icon file. Using the built-in image.")
            return create_icon_image()

        try:
            with Image.open(icon_path) as image:
                return image.copy()
        except OSError as e:
            logger.warning(f"Failed to load tray icon {icon_path}: {e}")
            return create_icon_image()

    def show_window(self):
        if self.window:
            self.window.show()

    def submit(self, text: str) -> bool:
        return self.app.add(text) is not None

    def quit(self):
        """Stop the tray, release the socket and leave the tkinter loop"""
        logger.info("Exiting...")
        self.running = False
        if self.tray:
            self.tray.stop()
        self.instance.close()
        if self.root:
            self.root.destroy()

    def _pump(self):
        self.dispatcher.drain()
        if self.running:
            self.root.after(DISPATCH_INTERVAL_MS, self._pump)

    def run(self) -> int:
        """Run until quit. Returns the process exit code."""
        if self.instance.role is not InstanceRole.PRIMARY:
            if self.instance.acquire() is InstanceRole.SECONDARY:
                return 0

        # Imported late: backend selection needs a desktop session
        from todotray.tray import TodoTray, tray_supported
        from todotray.window import EntryWindow

        if not tray_supported():
            logger.critical("System tray menus are not supported on this desktop")
            self.instance.close()
            return 1

        self.app.load()

        ui_cfg = self.config['ui']
        self.root = tk.Tk()
        self.window = EntryWindow(
            self.root,
            on_submit=self.submit,
            max_weight=int(self.config['todo']['max_input_weight']),
            title=ui_cfg['window_title'],
            width=int(ui_cfg['window_width']),
            height=int(ui_cfg['window_height']),
            status_revert_ms=int(ui_cfg['status_revert_ms']),
        )
        self.app.on_show(self.show_window)

        self.tray = TodoTray(
            self.app,
            self.load_tray_image(),
            on_add=self.show_window,
            on_quit=self.quit,
            title=ui_cfg['window_title'],
        )
        self.tray.start()

        self.running = True
        self.root.after(DISPATCH_INTERVAL_MS, self._pump)
        try:
            self.root.mainloop()
        finally:
            self.instance.close()
        return 0


def _show_error_dialog(message: str):
    """Best-effort error dialog; falls back to stderr without a display"""
    try:
        from tkinter import messagebox

        root = tk.Tk()
        root.withdraw()
        messagebox.showerror("todotray Error", message)
        root.destroy()
    except tk.TclError:
        print(message, file=sys.stderr)


def main():
    """Main entry point for tray app"""
    base_dir = app_dir()

    try:
        config = load_config(base_dir / CONFIG_FILE_NAME)
        application = TodoTrayApplication(config, base_dir)

        # A second launch only hands off; it must not touch logs or data
        if application.instance.acquire() is InstanceRole.SECONDARY:
            sys.exit(0)

        bootstrap_logging(config, base_dir)
        exit_code = application.run()
    except SingleInstanceError as e:
        logger.critical(f"Single instance check failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception("Fatal error in main")
        _show_error_dialog(f"todotray failed to start:\n\n{e}")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
