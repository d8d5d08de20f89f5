from enum import StrEnum, auto

from .constants import CREATED_AT, UPDATED_AT


class UpdateMethod(StrEnum):
    """ Describes the method in which something is updated. """
    INSERT = auto()
    UPDATE = auto()

def stamp_timestamps(record: dict, update_method: UpdateMethod, now: float) -> None:
    """ Writes the system-managed timestamps into the record. createdAt is only ever written on insert. """
    if update_method is UpdateMethod.INSERT:
        record[CREATED_AT] = now
    record[UPDATED_AT] = now

def next_timestamp(previous: float | None, now: float) -> float:
    """ Returns a timestamp that is strictly greater than previous, preferring now. """
    if previous is None or not isinstance(previous, (int, float)) or now > previous:
        return now
    # The clock did not advance (or went backwards) since the last write
    return float(previous) + 0.001
