"""
Search panel: query box plus candidate list
"""

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QLabel, QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from .aggregator import SearchAggregator
from .config import Config
from .models import BookmarkItem, FloatingWindowItem, SearchItem, TmuxPaneItem
from .restorer import BookmarkRestorer
from .storage import BookmarkStore


def item_text(item: SearchItem) -> str:
    if isinstance(item, BookmarkItem):
        return f"{item.bookmark.alias}    {item.bookmark.description}    [{item.group_tag}]"
    if isinstance(item, FloatingWindowItem):
        return f"🪟 {item.display_label}"
    if isinstance(item, TmuxPaneItem):
        return f"{item.display_label}    {item.pane.target}"
    raise TypeError(f"Unhandled search item: {item!r}")


class SearchPanel(QWidget):
    """Frameless panel; refreshes enumeration caches every time it is shown"""

    def __init__(
        self,
        aggregator: SearchAggregator,
        restorer: BookmarkRestorer,
        store: BookmarkStore,
        config: Config,
    ):
        super().__init__()
        self.aggregator = aggregator
        self.restorer = restorer
        self.store = store
        self.config = config

        self.setWindowTitle("focusbm")
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint)
        self.resize(self.config.get("panel.width", 560), self.config.get("panel.height", 420))

        self.init_ui()

        self.aggregator.items_changed.connect(self.populate)
        self.aggregator.selection_changed.connect(self.on_selection_changed)
        self.restorer.restore_failed.connect(lambda label, reason: self.status.setText(f"✗ {label}: {reason}"))
        self.store.bookmark_saved.connect(lambda alias: self.reload())
        self.store.bookmark_deleted.connect(lambda alias: self.reload())

    def init_ui(self):
        layout = QVBoxLayout(self)

        self.query_edit = QLineEdit()
        self.query_edit.setPlaceholderText("Search bookmarks...")
        self.query_edit.textChanged.connect(self.aggregator.rebuild)
        self.query_edit.installEventFilter(self)
        layout.addWidget(self.query_edit)

        self.result_list = QListWidget()
        font_size = self.store.effective_settings.list_font_size
        if font_size:
            font = QFont()
            font.setPointSizeF(font_size)
            self.result_list.setFont(font)
        self.result_list.itemActivated.connect(lambda _: self.restore_index(self.result_list.currentRow()))
        layout.addWidget(self.result_list)

        self.status = QLabel("")
        layout.addWidget(self.status)

    def reload(self):
        self.store.load()
        self.aggregator.load(self.store.bookmarks, self.store.effective_settings)

    def populate(self, items: list):
        self.result_list.clear()
        for item in items:
            row = QListWidgetItem(item_text(item))
            row.setData(Qt.ItemDataRole.UserRole, item.identity)
            self.result_list.addItem(row)
        self.on_selection_changed(self.aggregator.selected_index)

    def on_selection_changed(self, index: int):
        if 0 <= index < self.result_list.count():
            self.result_list.setCurrentRow(index)
            self.result_list.scrollToItem(self.result_list.item(index))

    def showEvent(self, event):
        self.status.setText("")
        self.query_edit.clear()
        self.aggregator.refresh()
        self.query_edit.setFocus()
        super().showEvent(event)

    def restore_index(self, index: int):
        item = self.aggregator.item_at(index)
        if item is None:
            return
        result = self.restorer.restore(item)
        if result.ok:
            self.hide()

    def eventFilter(self, obj, event):
        if obj is self.query_edit and event.type() == QEvent.Type.KeyPress:
            key = event.key()
            if key == Qt.Key.Key_Up.value:
                self.aggregator.move_up()
                return True
            if key == Qt.Key.Key_Down.value:
                self.aggregator.move_down()
                return True
            if key in (Qt.Key.Key_Return.value, Qt.Key.Key_Enter.value):
                self.restore_index(self.aggregator.selected_index)
                return True
            if key == Qt.Key.Key_Escape.value:
                self.hide()
                return True
            # 1-9 pick a row directly while the query is empty
            if not self.query_edit.text() and Qt.Key.Key_1.value <= key <= Qt.Key.Key_9.value:
                self.restore_index(key - Qt.Key.Key_1.value)
                return True
        return super().eventFilter(obj, event)
