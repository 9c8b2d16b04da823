import sys
from PyQt5.QtWidgets import QApplication

from gui.window import MainWindow
from simcal.algorithms.scheduler import CalendarState
from simcal.models.seat import DEFAULT_GROUPS
from simcal.utils.config import settings
from simcal.utils.log import configure_logging
from simcal.utils.memory_store import (
    SIMULATOR_GROUPS,
    InMemoryReservationStore,
    fetch_groups,
)
from simcal.utils.row_mapping import group_to_row


def main():
    configure_logging(settings.LOG_LEVEL)

    app = QApplication(sys.argv)

    # Make all fonts a bit bigger
    font = app.font()
    font.setPointSize(font.pointSize() + 1)
    app.setFont(font)

    store = InMemoryReservationStore({
        SIMULATOR_GROUPS: [group_to_row(g) for g in DEFAULT_GROUPS],
    })
    state = CalendarState(groups=fetch_groups(store))

    window = MainWindow(state, store)
    window.show()

    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
