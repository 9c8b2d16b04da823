from datetime import datetime

from PyQt5.QtWidgets import QWidget
from PyQt5.QtGui import QPainter, QColor, QPen, QFont
from PyQt5.QtCore import Qt, QRectF, pyqtSignal

from simcal.algorithms.geometry import classify_block, get_grid_position, offset_to_time, palette_key
from simcal.algorithms.scheduler import CalendarState
from simcal.utils.config import settings

THEME = {
    "border": "#333333",
    "main": "#fbbf24",
    "past_unpaid": "#454545",
    "past_paid": "#064e3b",
    "active_unpaid": "#dc2626",
    "active_paid": "#059669",
    "future_unpaid": "#1e1e1e",
    "future_paid": "#065f46",
}


class DayGridWidget(QWidget):
    """
    Day view for one equipment group:
    - X axis: one column per seat
    - Y axis: hours (state.day_start_hour..state.day_end_hour)
    - Coloured blocks for each reservation, placed with get_grid_position.
    """

    blockClicked = pyqtSignal(str)        # reservation id
    slotClicked = pyqtSignal(str, str)    # seat id, snapped "HH:MM"

    header_height = 30
    time_column_width = 56

    def __init__(self, state: CalendarState, group_id: str, view_date, parent=None):
        super().__init__(parent)
        self.state = state
        self.group_id = group_id
        self.view_date = view_date
        self.now = datetime.now()
        self.setMinimumHeight(600)
        self.setMinimumWidth(700)

        # (rect, reservation id) of every drawn block, for hit testing
        self._blocks = []

    def set_view(self, group_id: str, view_date):
        """Change group/day and redraw."""
        self.group_id = group_id
        self.view_date = view_date
        self.update()

    def set_now(self, now: datetime):
        self.now = now
        self.update()

    def _grid_rect(self) -> QRectF:
        return QRectF(
            self.time_column_width,
            self.header_height,
            self.width() - self.time_column_width,
            self.height() - self.header_height,
        )

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor("#0b0b0b"))

        seats = self.state.view_seats(self.group_id)
        if not seats:
            painter.end()
            return

        grid = self._grid_rect()
        col_width = grid.width() / len(seats)
        hours = self.state.day_end_hour - self.state.day_start_hour
        hour_height = grid.height() / hours

        # hour lines + labels
        painter.setFont(QFont("Segoe UI", 8))
        for i in range(hours + 1):
            y = grid.top() + i * hour_height
            painter.setPen(QPen(QColor("#222"), 1))
            painter.drawLine(int(grid.left()), int(y), int(grid.right()), int(y))
            if i < hours:
                painter.setPen(QColor("#777"))
                painter.drawText(4, int(y + 14), f"{self.state.day_start_hour + i:02d}:00")

        self._blocks = []
        for col, seat in enumerate(seats):
            x = grid.left() + col * col_width

            # seat header
            painter.setPen(QColor(THEME["main"]))
            painter.setFont(QFont("Segoe UI", 9, QFont.Bold))
            painter.drawText(
                QRectF(x, 0, col_width, self.header_height), Qt.AlignCenter, seat.label
            )
            painter.setPen(QPen(QColor("#222"), 1))
            painter.drawLine(int(x), int(grid.top()), int(x), int(grid.bottom()))

            for res in self.state.reservations_for_seat_on_day(seat.id, self.view_date):
                pos = get_grid_position(
                    res.start_time, res.end_time,
                    self.state.day_start_hour, self.state.day_end_hour,
                ).clipped()
                if pos.height <= 0:
                    continue

                rect = QRectF(
                    x + 3,
                    grid.top() + pos.top / 100 * grid.height(),
                    col_width - 6,
                    pos.height / 100 * grid.height(),
                )
                status = classify_block(res, self.now, self.view_date)
                painter.setBrush(QColor(THEME[palette_key(res, status)]))

                pen = QPen(QColor(THEME["border"]), 1)
                if not self.state.is_confirmed(res.id):
                    pen.setStyle(Qt.DashLine)
                painter.setPen(pen)
                painter.drawRoundedRect(rect, 4, 4)

                # name + time if there is room
                if rect.height() > 24:
                    painter.setPen(Qt.white)
                    painter.setFont(QFont("Segoe UI", 8, QFont.Bold))
                    painter.drawText(
                        rect, Qt.AlignCenter,
                        f"{res.start_time}-{res.end_time}\n{res.customer_name}",
                    )
                self._blocks.append((rect, res.id))

        painter.end()

    def mousePressEvent(self, event):
        seats = self.state.view_seats(self.group_id)
        grid = self._grid_rect()
        if not seats or not grid.contains(event.x(), event.y()):
            return

        for rect, reservation_id in self._blocks:
            if rect.contains(event.x(), event.y()):
                self.blockClicked.emit(reservation_id)
                return

        col = int((event.x() - grid.left()) / (grid.width() / len(seats)))
        col = min(col, len(seats) - 1)
        fraction = (event.y() - grid.top()) / grid.height()
        slot = offset_to_time(
            fraction,
            self.state.day_start_hour,
            self.state.day_end_hour,
            settings.SLOT_SNAP_MINUTES,
        )

        self.slotClicked.emit(seats[col].id, slot)
