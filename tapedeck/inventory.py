"""Client for the remote track inventory service.

The inventory serves the track list and accepts add/delete requests:

    GET    /api/tracks              list tracks
    POST   /api/download            add a track from a URL
    GET    /api/download/{id}       add-track progress
    DELETE /api/tracks/{id}         delete a track
    GET    /api/mode                read-only or read-write
"""

import requests
from config import INVENTORY_DOWNLOAD_TIMEOUT, INVENTORY_TIMEOUT, INVENTORY_URL
from pydantic import ValidationError
from tapedeck.errors import DuplicateTrackError, InventoryError, ReadOnlyInventoryError
from tapedeck.logging import inventory_logger, log_error, log_inventory_request, start_action
from tapedeck.models import DownloadResponse, DownloadStatus, ServerMode, Track
from urllib.parse import urljoin


def filter_tracks(tracks: list[Track], query: str) -> list[Track]:
    """Apply the search filter that produces the active queue.

    Matching is a case-insensitive substring test on the title; inventory order
    is kept.

    Args:
        tracks: Tracks in inventory order
        query: Search text; blank matches everything

    Returns:
        Matching tracks
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(tracks)
    return [track for track in tracks if needle in track.title.lower()]


class InventoryClient:
    """HTTP client for the inventory service."""

    def __init__(
        self,
        base_url: str = INVENTORY_URL,
        timeout: float = INVENTORY_TIMEOUT,
        download_timeout: float = INVENTORY_DOWNLOAD_TIMEOUT,
        session=None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.download_timeout = download_timeout
        self.session = session or requests.Session()
        self.readonly: bool | None = None

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = urljoin(self.base_url, path.lstrip("/"))
        try:
            kwargs.setdefault("timeout", self.timeout)
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            log_error(inventory_logger, e, method=method, url=url)
            raise InventoryError(f"{method} {url} failed: {e}") from e

        log_inventory_request(
            f"{method} {path}",
            status_code=response.status_code,
            description=f"{response.status_code} {response.reason}",
        )
        return response

    def _json(self, response: requests.Response):
        try:
            return response.json()
        except ValueError as e:
            raise InventoryError(f"Invalid JSON from {response.url}", response.status_code) from e

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.ok:
            return
        try:
            message = response.json().get("error") or response.reason
        except (ValueError, AttributeError):
            message = response.reason
        if response.status_code == 409:
            raise DuplicateTrackError(message, response.status_code)
        raise InventoryError(f"{response.status_code}: {message}", response.status_code)

    def _ensure_writable(self) -> None:
        if self.readonly is None:
            self.mode()
        if self.readonly:
            raise ReadOnlyInventoryError("Inventory service is read-only")

    def list_tracks(self) -> list[Track]:
        """Fetch the track list in inventory order.

        Relative track URLs are resolved against the service base URL.
        """
        with start_action(inventory_logger, "list_tracks"):
            response = self._request("GET", "/api/tracks")
            self._raise_for_status(response)

            try:
                tracks = [Track.model_validate(item) for item in self._json(response)]
            except (ValidationError, TypeError) as e:
                raise InventoryError(f"Unexpected track list payload: {e}", response.status_code) from e

            tracks = [track.model_copy(update={"url": urljoin(self.base_url, track.url)}) for track in tracks]
            log_inventory_request("list_tracks", count=len(tracks), description=f"{len(tracks)} tracks")
            return tracks

    def add_track(self, url: str, title: str | None = None) -> DownloadResponse:
        """Ask the service to fetch and add a track.

        Raises:
            DuplicateTrackError: The track is already in the inventory
            ReadOnlyInventoryError: The service does not accept writes
        """
        with start_action(inventory_logger, "add_track", url=url):
            self._ensure_writable()
            payload = {"url": url}
            if title:
                payload["title"] = title
            # The server replies only once the download and segmenting are done
            response = self._request("POST", "/api/download", json=payload, timeout=self.download_timeout)
            self._raise_for_status(response)
            return DownloadResponse.model_validate(self._json(response))

    def download_status(self, download_id: str) -> DownloadStatus:
        with start_action(inventory_logger, "download_status", download_id=download_id):
            response = self._request("GET", f"/api/download/{download_id}")
            self._raise_for_status(response)
            return DownloadStatus.model_validate(self._json(response))

    def delete_track(self, track_id: str) -> None:
        with start_action(inventory_logger, "delete_track", track_id=track_id):
            self._ensure_writable()
            response = self._request("DELETE", f"/api/tracks/{track_id}")
            self._raise_for_status(response)

    def mode(self) -> ServerMode:
        """Fetch and remember whether the service accepts writes."""
        response = self._request("GET", "/api/mode")
        self._raise_for_status(response)
        server_mode = ServerMode.model_validate(self._json(response))
        self.readonly = server_mode.readonly
        return server_mode
