from datetime import date, datetime, timedelta

from PyQt5.QtCore import Qt, QTimer, QDate, QTime
from PyQt5.QtWidgets import (
    QMainWindow,
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
    QGridLayout,
    QLabel,
    QPushButton,
    QComboBox,
    QDateEdit,
    QTimeEdit,
    QDialog,
    QLineEdit,
    QCheckBox,
    QMessageBox,
)

from simcal.algorithms.group_reservations import CustomerDetails
from simcal.algorithms.scheduler import CalendarState, PendingChange
from simcal.algorithms.seat_catalog import display_order
from simcal.algorithms.time_utils import snap_time
from simcal.models.reservation import Reservation
from simcal.utils.config import settings
from simcal.utils.errors import EmptyGroupViolation, OverlapConflict, SchedulingError
from simcal.utils.formatting import format_phone_number
from simcal.utils.memory_store import InMemoryReservationStore, fetch_reservations, save_change

from gui.timeline import DayGridWidget


def _conflict_message(exc: OverlapConflict, state: CalendarState) -> str:
    labels = {s.id: s.label for s in state.catalog}
    msg = (
        f"Seat {labels.get(exc.seat_id, exc.seat_id)} is not free "
        f"between {exc.start_time} and {exc.end_time}:\n\n"
    )
    for c in exc.conflicts:
        msg += f"• {c.customer_name} ({c.start_time}-{c.end_time})\n"
    return msg


def show_error(parent, exc: SchedulingError, state: CalendarState):
    """One place that turns core rejections into dialogs."""
    if isinstance(exc, OverlapConflict):
        QMessageBox.warning(parent, "Conflict", _conflict_message(exc, state))
    elif isinstance(exc, EmptyGroupViolation):
        QMessageBox.warning(
            parent,
            "Last seat",
            "This is the only seat left in the reservation.\n"
            "Delete the whole reservation instead.",
        )
    else:
        QMessageBox.warning(parent, "Error", str(exc))


def _to_qtime(value: str) -> QTime:
    return QTime.fromString(value, "HH:mm")


class BookingDialog(QDialog):
    def __init__(
        self,
        state: CalendarState,
        group_id: str,
        booking_date: date,
        seat_id: str | None = None,
        start_time: str = "12:00",
        parent=None,
    ):
        super().__init__(parent)
        self.state = state
        self.booking_date = booking_date
        self.change: PendingChange | None = None

        self.setWindowTitle(f"New Reservation {booking_date.isoformat()}")
        self.resize(420, 360)

        layout = QVBoxLayout()
        self.setLayout(layout)

        row1 = QHBoxLayout()
        row1.addWidget(QLabel("Name:"))
        self.name_edit = QLineEdit()
        row1.addWidget(self.name_edit)
        layout.addLayout(row1)

        row2 = QHBoxLayout()
        row2.addWidget(QLabel("Phone:"))
        self.phone_edit = QLineEdit()
        self.phone_edit.textEdited.connect(self._format_phone)
        row2.addWidget(self.phone_edit)
        layout.addLayout(row2)

        row3 = QHBoxLayout()
        row3.addWidget(QLabel("Start:"))
        self.start_edit = QTimeEdit(_to_qtime(start_time))
        self.start_edit.setDisplayFormat("HH:mm")
        row3.addWidget(self.start_edit)

        row3.addWidget(QLabel("End:"))
        self.end_edit = QTimeEdit(_to_qtime(start_time).addSecs(3600))
        self.end_edit.setDisplayFormat("HH:mm")
        row3.addWidget(self.end_edit)
        layout.addLayout(row3)

        # seat picker, laid out like the room
        seat_grid = QGridLayout()
        self.seat_boxes = {}
        seats = display_order(state.view_seats(group_id))
        for i, seat in enumerate(seats):
            box = QCheckBox(seat.label)
            box.setChecked(seat.id == seat_id)
            self.seat_boxes[seat.id] = box
            seat_grid.addWidget(box, i // 4, i % 4)
        layout.addLayout(seat_grid)

        self.paid_box = QCheckBox("Paid")
        layout.addWidget(self.paid_box)

        btn_row = QHBoxLayout()
        save_btn = QPushButton("Book")
        cancel_btn = QPushButton("Cancel")
        save_btn.clicked.connect(self.save)
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(save_btn)
        btn_row.addWidget(cancel_btn)
        layout.addLayout(btn_row)

    def _format_phone(self, text: str):
        self.phone_edit.setText(format_phone_number(text))

    def save(self):
        details = CustomerDetails(
            name=self.name_edit.text(),
            phone=self.phone_edit.text(),
            start_time=snap_time(self.start_edit.time().toString("HH:mm"), settings.EDIT_SNAP_MINUTES),
            end_time=snap_time(self.end_edit.time().toString("HH:mm"), settings.EDIT_SNAP_MINUTES),
            is_paid=self.paid_box.isChecked(),
        )
        seat_ids = [sid for sid, box in self.seat_boxes.items() if box.isChecked()]

        try:
            self.change = self.state.book_group(details, seat_ids, self.booking_date)
        except SchedulingError as exc:
            show_error(self, exc, self.state)
            return
        self.accept()


class ReservationInfoDialog(QDialog):
    """Details of one block plus the operations on its group."""

    def __init__(self, state: CalendarState, reservation: Reservation, on_change, parent=None):
        super().__init__(parent)
        self.state = state
        self.reservation = reservation
        self.on_change = on_change  # callback(PendingChange) into MainWindow

        self.setWindowTitle("Reservation")
        self.resize(400, 320)

        labels = {s.id: s.label for s in state.catalog}
        group_seats = [labels.get(sid, sid) for sid in state.group_seats(reservation)]

        layout = QVBoxLayout()
        self.setLayout(layout)

        name = QLabel(reservation.customer_name.upper())
        name.setStyleSheet("font-size: 18px; font-weight: 600;")
        layout.addWidget(name)
        layout.addWidget(QLabel(f"Phone: {reservation.customer_phone}"))
        layout.addWidget(QLabel(f"Time: {reservation.start_time} - {reservation.end_time}"))
        layout.addWidget(QLabel(f"Seats: {', '.join(group_seats)}"))
        layout.addWidget(QLabel(
            f"Created: {reservation.created_at:%H:%M %d.%m.%Y}   "
            f"{'PAID' if reservation.is_paid else 'NOT PAID'}"
        ))

        # add a seat to this reservation
        add_row = QHBoxLayout()
        self.seat_combo = QComboBox()
        taken = set(state.group_seats(reservation))
        group_id = next(
            (s.group_id for s in state.catalog if s.id == reservation.seat_id), None
        )
        for seat in state.view_seats(group_id) if group_id else []:
            if seat.id not in taken:
                self.seat_combo.addItem(seat.label, seat.id)
        add_btn = QPushButton("Add seat")
        add_btn.clicked.connect(self.add_seat)
        add_row.addWidget(self.seat_combo)
        add_row.addWidget(add_btn)
        layout.addLayout(add_row)

        btn_row = QHBoxLayout()
        paid_btn = QPushButton("Mark unpaid" if reservation.is_paid else "Mark paid")
        remove_btn = QPushButton("Remove this seat")
        delete_btn = QPushButton("Delete reservation")
        paid_btn.clicked.connect(self.toggle_paid)
        remove_btn.clicked.connect(self.remove_seat)
        delete_btn.clicked.connect(self.delete_group)
        btn_row.addWidget(paid_btn)
        btn_row.addWidget(remove_btn)
        btn_row.addWidget(delete_btn)
        layout.addLayout(btn_row)

    def _run(self, action):
        try:
            change = action()
        except SchedulingError as exc:
            show_error(self, exc, self.state)
            return
        self.on_change(change)
        self.accept()

    def add_seat(self):
        seat_id = self.seat_combo.currentData()
        if seat_id is None:
            QMessageBox.warning(self, "No seat", "Every seat of this group is already in the reservation.")
            return
        self._run(lambda: self.state.add_seat_to_group(self.reservation.id, seat_id))

    def remove_seat(self):
        self._run(lambda: self.state.remove_seat_from_group(self.reservation.id))

    def toggle_paid(self):
        group_ids = [
            r.id for r in self.state.reservations_for_day(self.reservation.date)
            if r.group_reservation_id == self.reservation.group_reservation_id
        ]
        self._run(lambda: self.state.bulk_edit(group_ids, is_paid=not self.reservation.is_paid))

    def delete_group(self):
        answer = QMessageBox.question(
            self, "Delete", f"Delete the whole reservation of {self.reservation.customer_name}?"
        )
        if answer == QMessageBox.Yes:
            self._run(lambda: self.state.delete_group(self.reservation.id))


class MainWindow(QMainWindow):
    def __init__(self, state: CalendarState, store: InMemoryReservationStore, parent=None):
        super().__init__(parent)
        self.state = state
        self.store = store

        self.setWindowTitle("Simulator Reservations")
        self.resize(1300, 800)
        self.setStyleSheet("""
            QMainWindow { background: #111111; }
            QLabel { color: #e5e5e5; }
            QPushButton {
                background: #fbbf24;
                color: #000000;
                font-weight: 600;
                padding: 6px 14px;
                border-radius: 6px;
            }
        """)

        central = QWidget()
        root = QVBoxLayout()
        root.setContentsMargins(16, 16, 16, 16)
        central.setLayout(root)
        self.setCentralWidget(central)

        # ---------- header ----------
        header = QHBoxLayout()
        self.group_combo = QComboBox()
        for group in sorted(state.groups, key=lambda g: g.order):
            self.group_combo.addItem(group.name, group.id)
        self.group_combo.currentIndexChanged.connect(self._view_changed)

        prev_btn = QPushButton("<")
        next_btn = QPushButton(">")
        prev_btn.clicked.connect(lambda: self._shift_day(-1))
        next_btn.clicked.connect(lambda: self._shift_day(1))

        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDate(QDate.currentDate())
        self.date_edit.dateChanged.connect(self._view_changed)

        new_btn = QPushButton("New Reservation")
        new_btn.clicked.connect(lambda: self._open_booking())

        header.addWidget(self.group_combo)
        header.addStretch(1)
        header.addWidget(prev_btn)
        header.addWidget(self.date_edit)
        header.addWidget(next_btn)
        header.addStretch(1)
        header.addWidget(new_btn)
        root.addLayout(header)

        # ---------- grid ----------
        self.grid = DayGridWidget(state, self._current_group(), self._current_date())
        self.grid.slotClicked.connect(self._on_slot_clicked)
        self.grid.blockClicked.connect(self._on_block_clicked)
        root.addWidget(self.grid, stretch=1)

        self.status_label = QLabel()
        self.status_label.setAlignment(Qt.AlignRight)
        root.addWidget(self.status_label)

        # past/active colouring follows the clock
        self._clock = QTimer(self)
        self._clock.setInterval(30_000)
        self._clock.timeout.connect(lambda: self.grid.set_now(datetime.now()))
        self._clock.start()

        self.refresh()

    # ---------- helpers ----------

    def _current_group(self) -> str:
        return self.group_combo.currentData()

    def _current_date(self) -> date:
        qd = self.date_edit.date()
        return date(qd.year(), qd.month(), qd.day())

    def _shift_day(self, days: int):
        d = self._current_date() + timedelta(days=days)
        self.date_edit.setDate(QDate(d.year, d.month, d.day))

    def _view_changed(self, *_):
        self.grid.set_view(self._current_group(), self._current_date())

    def refresh(self):
        """Re-read the store; whatever it returns replaces local state."""
        self.state.load_snapshot(fetch_reservations(self.store))
        problems = []
        orphans = self.state.orphaned_reservations()
        if orphans:
            problems.append(f"{len(orphans)} reservation(s) on seats that no longer exist")
        clashes = self.state.double_bookings()
        if clashes:
            problems.append(f"{len(clashes)} double booking(s)")
        self.status_label.setText("   ".join(problems))
        self.grid.update()

    def commit(self, change: PendingChange):
        # paint the unconfirmed (dashed) blocks before the write, the re-read replaces them
        self.grid.repaint()
        save_change(self.store, change)
        self.refresh()

    # ---------- grid events ----------

    def _open_booking(self, seat_id: str | None = None, start_time: str = "12:00"):
        dialog = BookingDialog(
            self.state, self._current_group(), self._current_date(),
            seat_id=seat_id, start_time=start_time, parent=self,
        )
        if dialog.exec_() and dialog.change is not None:
            self.commit(dialog.change)

    def _on_slot_clicked(self, seat_id: str, start_time: str):
        self._open_booking(seat_id, start_time)

    def _on_block_clicked(self, reservation_id: str):
        res = self.state.find_reservation(reservation_id)
        if res is None:
            return
        dialog = ReservationInfoDialog(self.state, res, on_change=self.commit, parent=self)
        dialog.exec_()
