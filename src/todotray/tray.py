#!/usr/bin/env python3
"""
todotray System Tray Icon
Lists the to-dos in the tray menu; clicking one removes it
"""

import logging
import threading
from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem as item

from todotray.context import TodoApp

logger = logging.getLogger(__name__)

ADD_LABEL = "+ New to-do"
QUIT_LABEL = "Quit"


def tray_supported() -> bool:
    """Whether the pystray backend of this desktop can show a menu"""
    return bool(getattr(pystray.Icon, 'HAS_MENU', False))


class TodoTray:
    """System tray icon for the to-do list"""

    def __init__(self, app: TodoApp, image: Image.Image,
                 on_add: Callable[[], None], on_quit: Callable[[], None],
                 title: str = "To-do"):
        """
        Initialize tray icon

        Every menu callback arrives on the pystray thread and is forwarded to
        the UI thread through ``app.apply``.
        """
        self.app = app
        self.on_add = on_add
        self.on_quit = on_quit
        self.icon = pystray.Icon(
            name='todotray',
            icon=image,
            title=title,
            menu=self.create_menu()
        )

        # Rebuild after every add/delete
        app.subscribe(self.refresh_menu)

    def _make_delete_callback(self, todo_id: str):
        """Create callback for a specific to-do"""
        def callback(icon, item_obj):
            self.app.apply(self.app.delete, todo_id)
        return callback

    def _create_todo_items(self):
        """Create one menu item per to-do, or the disabled placeholder"""
        items = []
        for row in self.app.menu_rows():
            if row.todo_id is None:
                items.append(item(row.label, lambda: None, enabled=False))
            else:
                items.append(item(row.label, self._make_delete_callback(row.todo_id)))
        return items

    def create_menu(self):
        """Create tray menu"""
        return pystray.Menu(
            item(
                ADD_LABEL,
                lambda icon, item: self.app.apply(self.on_add)
            ),
            pystray.Menu.SEPARATOR,
            *self._create_todo_items(),
            pystray.Menu.SEPARATOR,
            item(
                QUIT_LABEL,
                lambda icon, item: self.app.apply(self.on_quit)
            )
        )

    def refresh_menu(self):
        """Replace the menu with one built from the current list"""
        self.icon.menu = self.create_menu()
        self.icon.update_menu()

    def start(self):
        """Run the tray loop on a daemon thread so tkinter keeps the main thread"""
        thread = threading.Thread(target=self.icon.run, name='TrayIcon', daemon=True)
        thread.start()
        logger.info("Tray icon started")

    def stop(self):
        self.icon.stop()
