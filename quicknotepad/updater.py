"""Release checks against the project's GitHub repository."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass

import requests

from . import __version__

logger = logging.getLogger(__name__)

DEFAULT_REPO = "DomanskiFilip/quick_notepad"
USER_AGENT = "quick-notepad"
REQUEST_TIMEOUT = 10

_TARGET_TRIPLES = {
    ("linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("darwin", "x86_64"): "x86_64-apple-darwin",
    ("darwin", "arm64"): "aarch64-apple-darwin",
    ("windows", "amd64"): "x86_64-pc-windows-msvc",
}
_PLATFORM_NAMES = {"linux": "linux", "darwin": "macos", "windows": "windows"}


class UpdateCheckError(Exception):
    """Raised when release metadata cannot be fetched or understood."""


@dataclass(frozen=True)
class UpdateInfo:
    current_version: str
    latest_version: str
    update_available: bool
    release_notes: str = ""
    download_url: str = ""


def _version_parts(version: str) -> list[int]:
    parts: list[int] = []
    for piece in version.split("."):
        if piece.isdigit():
            parts.append(int(piece))
    return parts


def is_newer_version(current: str, latest: str) -> bool:
    """Compare the first three numeric components; missing ones count as 0."""
    current_parts = _version_parts(current)
    latest_parts = _version_parts(latest)
    for idx in range(3):
        cur = current_parts[idx] if idx < len(current_parts) else 0
        new = latest_parts[idx] if idx < len(latest_parts) else 0
        if new != cur:
            return new > cur
    return False


def find_matching_asset(
    assets: list[dict[str, object]],
    system: str | None = None,
    machine: str | None = None,
) -> dict[str, object]:
    """Pick the release asset for a platform, by target triple then by OS name."""
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()

    triple = _TARGET_TRIPLES.get((system, machine))
    if triple is not None:
        for asset in assets:
            if triple in str(asset.get("name", "")):
                return asset

    platform_name = _PLATFORM_NAMES.get(system)
    if platform_name is None:
        raise UpdateCheckError(f"unsupported platform: {system}")
    for asset in assets:
        if platform_name in str(asset.get("name", "")).lower():
            return asset
    raise UpdateCheckError(f"no release asset for {system}/{machine}")


class Updater:
    """Query the latest GitHub release of ``repo``."""

    def __init__(
        self,
        repo: str = DEFAULT_REPO,
        session: requests.Session | None = None,
        current_version: str = __version__,
    ) -> None:
        self.repo = repo
        self.current_version = current_version
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @property
    def latest_release_url(self) -> str:
        return f"https://api.github.com/repos/{self.repo}/releases/latest"

    def fetch_latest_release(self) -> dict[str, object]:
        try:
            response = self.session.get(self.latest_release_url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise UpdateCheckError(f"could not reach GitHub: {exc}") from exc
        if response.status_code != 200:
            raise UpdateCheckError(f"failed to fetch releases: HTTP {response.status_code}")
        try:
            release = response.json()
        except ValueError as exc:
            raise UpdateCheckError("release metadata is not valid JSON") from exc
        if not isinstance(release, dict) or not isinstance(release.get("tag_name"), str):
            raise UpdateCheckError("release metadata has no tag name")
        return release

    def check_for_updates(self) -> UpdateInfo:
        """Compare the latest release with ours and find its download for this machine."""
        release = self.fetch_latest_release()
        latest = str(release["tag_name"]).lstrip("v")
        update_available = is_newer_version(self.current_version, latest)
        download_url = ""
        if update_available:
            download_url = self._download_url(release)
        info = UpdateInfo(
            current_version=self.current_version,
            latest_version=latest,
            update_available=update_available,
            release_notes=str(release.get("body") or ""),
            download_url=download_url,
        )
        logger.info("update check: current=%s latest=%s", info.current_version, latest)
        return info

    def _download_url(self, release: dict[str, object]) -> str:
        assets = release.get("assets")
        if not isinstance(assets, list):
            return ""
        try:
            asset = find_matching_asset([asset for asset in assets if isinstance(asset, dict)])
        except UpdateCheckError as exc:
            logger.info("no download for this machine: %s", exc)
            return ""
        return str(asset.get("browser_download_url") or "")
