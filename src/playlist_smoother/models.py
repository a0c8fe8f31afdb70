from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class Track:
    track_id: str
    uri: str
    name: str
    artist: str
    bpm: float | None = None
    camelot_code: str | None = None
    energy: float | None = None
    original_index: int = 0
    album_art: str = ""
    duration_ms: int = 0

    @property
    def has_attributes(self) -> bool:
        return self.bpm is not None or self.camelot_code is not None or self.energy is not None

    def with_attributes(
        self,
        bpm: float | None,
        camelot_code: str | None,
        energy: float | None,
    ) -> Track:
        return replace(self, bpm=bpm, camelot_code=camelot_code, energy=energy)


@dataclass(slots=True)
class SmoothResult:
    sorted_tracks: list[Track] = field(default_factory=list)
    original_cost: float = 0.0
    optimized_cost: float = 0.0

    @property
    def improvement_percent(self) -> int:
        """Rounded relative cost reduction; 0 when there was nothing to improve."""
        if self.original_cost <= 0:
            return 0
        return round((self.original_cost - self.optimized_cost) / self.original_cost * 100)


@dataclass(slots=True)
class SongDetails:
    """Raw attribute payload returned by the BPM lookup service."""

    tempo: str | None = None
    key_of: str | None = None
    open_key: str | None = None
    danceability: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> SongDetails:
        def _text(name: str) -> str | None:
            value = payload.get(name)
            return None if value is None else str(value)

        return cls(
            tempo=_text("tempo"),
            key_of=_text("key_of"),
            open_key=_text("open_key"),
            danceability=_text("danceability"),
        )
