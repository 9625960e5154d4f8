"""Named, predefined test selections."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from siteaudit.core.config import PlaylistDefinition, ProjectConfig
from siteaudit.core.errors import PlaylistNotFoundError


@dataclass(frozen=True)
class PlaylistCheck:
    """Result of checking a playlist against the known tests."""

    playlist_id: str
    missing_tests: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.missing_tests


class PlaylistCatalog(Mapping[str, PlaylistDefinition]):
    """Read-only view over the playlists of a project config."""

    def __init__(self, playlists: Mapping[str, PlaylistDefinition]):
        self._playlists = dict(playlists)

    @classmethod
    def from_project(cls, config: ProjectConfig) -> PlaylistCatalog:
        return cls(config.playlists)

    def __getitem__(self, playlist_id: str) -> PlaylistDefinition:
        return self._playlists[playlist_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._playlists)

    def __len__(self) -> int:
        return len(self._playlists)

    def get_playlist(self, playlist_id: str) -> PlaylistDefinition:
        """Look up a playlist.

        Raises:
            PlaylistNotFoundError: If no playlist has this id.
        """
        try:
            return self._playlists[playlist_id]
        except KeyError:
            raise PlaylistNotFoundError(playlist_id, self._playlists) from None

    def get_playlist_tests(self, playlist_id: str) -> list[str]:
        """Test ids of a playlist, in declaration order."""
        return list(self.get_playlist(playlist_id).tests)

    def validate_playlist(
        self,
        playlist_id: str,
        known_tests: Iterable[str],
    ) -> PlaylistCheck:
        """Report playlist tests that are not known tests.

        Raises:
            PlaylistNotFoundError: If no playlist has this id.
        """
        known = set(known_tests)
        missing = tuple(
            dict.fromkeys(t for t in self.get_playlist(playlist_id).tests if t not in known)
        )
        return PlaylistCheck(playlist_id=playlist_id, missing_tests=missing)
