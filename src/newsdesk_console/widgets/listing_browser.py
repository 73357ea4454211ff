"""
Table-based listing screen bound to a FacetedListingController.

The widget only renders ``ViewState`` and forwards user input; every
decision about which query runs lives in the controller.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QComboBox, QPushButton,
    QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView, QLabel
)
from PyQt6.QtCore import Qt, pyqtSignal

from newsdesk_console.api.content_types import ContentType
from newsdesk_console.listing import presentation
from newsdesk_console.listing.controller import FacetedListingController
from newsdesk_console.listing.facets import ALL_STATUSES, Facet, NewsStatus
from newsdesk_console.listing.models import ListingQuery, Phase, ViewState
from newsdesk_console.listing.mutations import MutationKind

logger = logging.getLogger(__name__)

ID_KEY = "_id"


@dataclass
class ColumnDef:
    """Declarative column configuration for listing tables."""
    name: str
    key: str
    width: Optional[int] = None
    resizable: bool = True


DEFAULT_COLUMNS = [
    ColumnDef("Title", "title", width=320),
    ColumnDef("Category", "category", width=120),
    ColumnDef("Author", "author", width=140),
    ColumnDef("Created", "createdAt", width=160),
]


class ContentListingBrowser(QWidget):
    """
    Listing screen for one content type.

    Provides:
    - Search input (debounced by the controller)
    - Category and status filters, shown only when the content type supports them
    - Paged table with previous/next navigation
    - Status line with loading, empty, error and summary texts
    - Retry, clear-filters and delete actions

    Usage:
        client = ContentApiClient(get_content_type("ghanapolitan", "article"))
        controller = FacetedListingController.for_client(
            client, initial_snapshot=client.fetch_initial_snapshot()
        )
        browser = ContentListingBrowser(controller, client.content_type)
    """

    item_selected = pyqtSignal(str, object)  # key, item
    item_double_clicked = pyqtSignal(str, object)  # key, item
    notification = pyqtSignal(str, str)  # message, level ("success" | "error")

    def __init__(
        self,
        controller: FacetedListingController,
        content_type: ContentType,
        columns: Optional[List[ColumnDef]] = None,
        confirm_delete: Optional[Callable[[str, dict], bool]] = None,
        parent=None
    ):
        super().__init__(parent)
        self.controller = controller
        self.content_type = content_type
        self._columns = columns or DEFAULT_COLUMNS
        self._confirm_delete = confirm_delete
        self._rows: List[dict] = []

        self._setup_ui()
        self._setup_connections()
        self._sync_filter_widgets(controller.query)
        self._render(controller.view_state)

    def _setup_ui(self):
        """Set up the UI components."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        self.headline_label = QLabel(self.content_type.plural_label)
        layout.addWidget(self.headline_label)

        # Filter row
        filter_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(f"Search {self.content_type.plural_label.lower()}...")
        self.search_input.setText(self.controller.raw_search_text)
        filter_row.addWidget(self.search_input, 1)

        self.category_combo = QComboBox()
        self.category_combo.addItem("All Categories", "")
        for category in self.content_type.categories:
            self.category_combo.addItem(category, category)
        self.category_combo.setVisible(self.content_type.supports(Facet.CATEGORY))
        filter_row.addWidget(self.category_combo)

        self.status_combo = QComboBox()
        self.status_combo.addItem("All Statuses", ALL_STATUSES)
        for status in NewsStatus:
            self.status_combo.addItem(status.label, status.value)
        self.status_combo.setVisible(self.content_type.supports(Facet.STATUS))
        filter_row.addWidget(self.status_combo)

        self.clear_button = QPushButton("Clear Filters")
        filter_row.addWidget(self.clear_button)
        layout.addLayout(filter_row)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        self.table_widget = QTableWidget()
        self._configure_table()
        layout.addWidget(self.table_widget, 1)  # Stretch to fill

        # Action / pager row
        action_row = QHBoxLayout()
        self.retry_button = QPushButton("Retry")
        self.retry_button.setVisible(False)
        action_row.addWidget(self.retry_button)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setEnabled(False)
        action_row.addWidget(self.delete_button)
        action_row.addStretch(1)
        self.prev_button = QPushButton("Previous")
        self.page_label = QLabel("")
        self.next_button = QPushButton("Next")
        action_row.addWidget(self.prev_button)
        action_row.addWidget(self.page_label)
        action_row.addWidget(self.next_button)
        layout.addLayout(action_row)

    def _configure_table(self):
        """Configure table based on column definitions."""
        self.table_widget.setColumnCount(len(self._columns))
        self.table_widget.setHorizontalHeaderLabels([col.name for col in self._columns])

        header = self.table_widget.horizontalHeader()
        header.setSectionsMovable(True)
        for i, col in enumerate(self._columns):
            mode = QHeaderView.ResizeMode.Interactive if col.resizable else QHeaderView.ResizeMode.Fixed
            header.setSectionResizeMode(i, mode)
            if col.width:
                self.table_widget.setColumnWidth(i, col.width)

        self.table_widget.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_widget.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_widget.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)

    def _setup_connections(self):
        """Connect signals to slots."""
        self.search_input.textChanged.connect(self.controller.set_search_text)
        self.search_input.returnPressed.connect(self.controller.flush_search)
        self.category_combo.currentIndexChanged.connect(self._on_category_changed)
        self.status_combo.currentIndexChanged.connect(self._on_status_changed)
        self.clear_button.clicked.connect(self.clear_filters)
        self.retry_button.clicked.connect(self._on_retry)
        self.delete_button.clicked.connect(self.delete_selected)
        self.prev_button.clicked.connect(self.controller.previous_page)
        self.next_button.clicked.connect(self.controller.next_page)
        self.table_widget.itemSelectionChanged.connect(self._on_selection_changed)
        self.table_widget.itemDoubleClicked.connect(self._on_double_click)

        self.controller.view_state_changed.connect(self._render)
        self.controller.query_changed.connect(self._sync_filter_widgets)
        self.controller.mutation_succeeded.connect(self._on_mutation_succeeded)
        self.controller.mutation_failed.connect(self._on_mutation_failed)

    # --- Input handlers ---

    def _on_category_changed(self, index: int):
        self.controller.set_category(self.category_combo.itemData(index) or "")

    def _on_status_changed(self, index: int):
        self.controller.set_status(self.status_combo.itemData(index) or ALL_STATUSES)

    def _on_retry(self):
        if self.controller.active_facet is Facet.SEARCH:
            self.clear_filters()
        else:
            self.controller.retry()

    def clear_filters(self):
        """Reset filter widgets without re-emitting their change signals."""
        for widget in (self.search_input, self.category_combo, self.status_combo):
            widget.blockSignals(True)
        try:
            self.search_input.clear()
            self.category_combo.setCurrentIndex(0)
            self.status_combo.setCurrentIndex(0)
        finally:
            for widget in (self.search_input, self.category_combo, self.status_combo):
                widget.blockSignals(False)
        self.controller.clear_filters()

    def delete_selected(self):
        """Delete the selected item through the controller."""
        key = self.get_selected_key()
        if key is None:
            return
        item = self._item_for_key(key)
        if self._confirm_delete is not None and not self._confirm_delete(key, item):
            return
        self.controller.delete_item(key, button=self.delete_button)

    # --- Selection ---

    def get_selected_key(self) -> Optional[str]:
        """Return the id of the selected row, if any."""
        rows = {table_item.row() for table_item in self.table_widget.selectedItems()}
        if not rows:
            return None
        key_item = self.table_widget.item(min(rows), 0)
        return key_item.data(Qt.ItemDataRole.UserRole)

    def _item_for_key(self, key: str) -> dict:
        # Key in table → item in current rows (invariant)
        return next(item for item in self._rows if str(item.get(ID_KEY)) == key)

    def _on_selection_changed(self):
        key = self.get_selected_key()
        self.delete_button.setEnabled(key is not None)
        if key is None:
            return  # Valid: user clicked empty area
        self.item_selected.emit(key, self._item_for_key(key))

    def _on_double_click(self, table_item: QTableWidgetItem):
        key_item = self.table_widget.item(table_item.row(), 0)
        key = key_item.data(Qt.ItemDataRole.UserRole)
        self.item_double_clicked.emit(key, self._item_for_key(key))

    # --- Rendering ---

    def _sync_filter_widgets(self, query: ListingQuery):
        """Lower-precedence filters are disabled while a higher one is active."""
        search_active = query.facet is Facet.SEARCH
        self.category_combo.setEnabled(not search_active)
        self.status_combo.setEnabled(not search_active and query.facet is not Facet.CATEGORY)
        self.clear_button.setEnabled(self.controller.has_active_filters())

    def _render(self, state: ViewState):
        selection = self.controller.query.selection
        plural = self.content_type.plural_label
        self.headline_label.setText(presentation.headline(selection, plural))
        self.retry_button.setVisible(state.has_error)
        self.retry_button.setText(presentation.retry_label(selection))

        if state.phase is Phase.LOADING:
            self.status_label.setText(presentation.loading_text(selection, plural))
        elif state.phase is Phase.ERROR:
            self.status_label.setText(
                f"{presentation.error_text(selection, plural)}: {state.error_detail}"
            )
        elif state.result is not None and state.result.is_empty:
            self.status_label.setText(presentation.empty_text(selection, plural))
        elif state.result is not None:
            text = presentation.summary_text(selection, state.result.total, plural)
            if state.has_error:
                text += f" (refresh failed: {state.error_detail})"
            self.status_label.setText(text)
        else:
            self.status_label.setText("")

        if state.result is not None:
            self.populate_table(list(state.result.items))
        elif state.phase in (Phase.LOADING, Phase.ERROR):
            self.populate_table([])
        self._update_pager(state)

    def populate_table(self, items: List[dict]):
        """Fill the table with one row per item."""
        self._rows = items
        self.table_widget.setRowCount(len(items))
        for row, item in enumerate(items):
            for col, column in enumerate(self._columns):
                value = item.get(column.key, "")
                cell = QTableWidgetItem("" if value is None else str(value))
                if col == 0:
                    cell.setData(Qt.ItemDataRole.UserRole, str(item.get(ID_KEY, "")))
                self.table_widget.setItem(row, col, cell)
        self.delete_button.setEnabled(self.get_selected_key() is not None)

    def _update_pager(self, state: ViewState):
        page = self.controller.page
        total_pages = state.result.total_pages if state.result is not None else 1
        self.page_label.setText(f"Page {page} of {total_pages}")
        self.prev_button.setEnabled(page > 1)
        self.next_button.setEnabled(page < total_pages)

    # --- Mutation feedback ---

    def _on_mutation_succeeded(self, kind: MutationKind, payload):
        label = self.content_type.label
        self.notification.emit(f"{label} {kind.value}d successfully", "success")

    def _on_mutation_failed(self, kind: MutationKind, error: Exception):
        self.notification.emit(str(error), "error")

    def closeEvent(self, event):
        self.controller.close()
        super().closeEvent(event)
