"""Audio playback through libVLC (python-vlc)."""

from __future__ import annotations

import logging
from typing import Any, Optional, cast
import threading

logger = logging.getLogger(__name__)

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


class VlcPlayer:
    """Thin wrapper around python-vlc's MediaPlayer.

    Calls report failure through their return value instead of raising, so a
    broken file or audio device never takes the UI loop down.
    """

    def __init__(self) -> None:
        _load_vlc()
        if vlc is None:
            raise RuntimeError(
                "rumu needs libVLC for playback. Install VLC and python-vlc."
            ) from _VLC_IMPORT_ERROR
        self._instance = cast(Any, vlc).Instance("--no-video")
        self._player = self._instance.media_player_new()
        self._current_media: Optional[str] = None
        self._song_ended = threading.Event()
        self._attach_end_reached_event()

    def _attach_end_reached_event(self) -> None:
        if vlc is None:
            return
        vlc_module = cast(Any, vlc)
        try:
            event_manager = self._player.event_manager()
            event_manager.event_attach(
                vlc_module.EventType.MediaPlayerEndReached, self._on_media_end
            )
        except Exception:
            logger.warning("VLC end-of-media events unavailable", exc_info=True)

    def _on_media_end(self, event: object) -> None:
        del event
        self._song_ended.set()

    @property
    def current_media(self) -> Optional[str]:
        return self._current_media

    def play(self, path: str) -> bool:
        """Load ``path`` and start playing it."""
        try:
            media = self._instance.media_new(path)
            self._player.set_media(media)
            self._song_ended.clear()
            result = self._player.play()
        except Exception:
            logger.exception("VLC failed to play %s", path)
            return False
        if result == -1:
            logger.warning("VLC refused to play %s", path)
            return False
        self._current_media = path
        return True

    def stop(self) -> bool:
        try:
            self._player.stop()
        except Exception:
            logger.exception("VLC failed to stop")
            return False
        return True

    def is_song_finished(self) -> bool:
        """Return True once per end-of-media event."""
        if self._song_ended.is_set():
            self._song_ended.clear()
            return True
        return False

    def set_volume(self, volume: int) -> bool:
        try:
            self._player.audio_set_volume(max(0, min(100, int(volume))))
        except Exception:
            logger.exception("VLC failed to set volume")
            return False
        return True

    def song_duration(self) -> float:
        """Media length in seconds, 0.0 when unknown."""
        length = self._read_ms("get_length")
        return 0.0 if length is None else length / 1000.0

    def time_remaining(self) -> float:
        """Seconds left in the current media, 0.0 when unknown."""
        length = self._read_ms("get_length")
        position = self._read_ms("get_time")
        if length is None or position is None:
            return 0.0
        return max(0.0, (length - position) / 1000.0)

    def _read_ms(self, getter: str) -> Optional[int]:
        try:
            value = getattr(self._player, getter)()
        except Exception:
            return None
        if value is None or value < 0:
            return None
        return int(value)
