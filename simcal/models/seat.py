from dataclasses import dataclass


@dataclass(frozen=True)
class Seat:
    """One bookable simulator seat. `id` is stable, `label` is for display only."""
    id: str
    label: str
    group_id: str


@dataclass
class SimulatorGroup:
    """An equipment class (e.g. a wheel/pedal model) owning `seat_count` seats."""
    id: str
    name: str
    seat_count: int = 8
    order: int = 0

    def __post_init__(self):
        if self.seat_count < 1:
            raise ValueError(f"group {self.id} needs at least one seat")


DEFAULT_GROUPS = (
    SimulatorGroup(id="LOGITECH", name="Logitech G29", seat_count=8, order=0),
    SimulatorGroup(id="MOZA", name="Moza R5", seat_count=8, order=1),
)
