"""Holds the latest search candidates so a later selection can be resolved."""

from __future__ import annotations

from dataclasses import dataclass

from .models import GeocodeCandidate


@dataclass(frozen=True)
class CandidateHandle:
    """Reference to one candidate of one specific search."""

    session_id: int
    index: int

    @property
    def token(self) -> str:
        return f"{self.session_id}:{self.index}"

    @classmethod
    def parse(cls, token: str) -> CandidateHandle | None:
        session_id, sep, index = token.partition(":")
        if not sep:
            return None
        try:
            return cls(session_id=int(session_id), index=int(index))
        except ValueError:
            return None


class SearchSession:
    """The most recent ordered list of geocoding candidates.

    Each ``record_search`` replaces the list wholesale. Lookups are bounds
    checked and return None rather than raising.
    """

    def __init__(self):
        self._candidates: tuple[GeocodeCandidate, ...] | None = None
        self._session_id = 0

    @property
    def session_id(self) -> int:
        return self._session_id

    def record_search(self, candidates: list[GeocodeCandidate]) -> list[CandidateHandle]:
        self._session_id += 1
        self._candidates = tuple(candidates)
        return [CandidateHandle(self._session_id, i) for i in range(len(self._candidates))]

    def resolve(self, index: int) -> GeocodeCandidate | None:
        if self._candidates is None:
            return None
        if not 0 <= index < len(self._candidates):
            return None
        return self._candidates[index]

    def resolve_handle(self, handle: CandidateHandle | str) -> GeocodeCandidate | None:
        if isinstance(handle, str):
            handle = CandidateHandle.parse(handle)
            if handle is None:
                return None
        if handle.session_id != self._session_id:
            return None
        return self.resolve(handle.index)
