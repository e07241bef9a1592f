"""Applicant ids chosen for bulk actions."""
from typing import Iterable, Iterator, List, Set


class SelectionSet:
    """
    Ids of the applicants ticked on the board.

    Only bulk moves consume it. It is mutated by toggle/clear and reset by
    the controller after a successful bulk move, never as a side effect of
    reloads, filter changes or single moves.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: Set[str] = set(ids)

    def toggle(self, applicant_id: str) -> bool:
        """Flip membership of `applicant_id`; returns True if now selected."""
        if applicant_id in self._ids:
            self._ids.discard(applicant_id)
            return False
        self._ids.add(applicant_id)
        return True

    def clear(self) -> None:
        self._ids.clear()

    def ids(self) -> List[str]:
        return sorted(self._ids)

    def __contains__(self, applicant_id: object) -> bool:
        return applicant_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __repr__(self) -> str:
        return f"SelectionSet({self.ids()!r})"
