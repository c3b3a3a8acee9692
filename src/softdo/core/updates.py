"""Pure release comparison logic - no I/O dependencies."""

from dataclasses import dataclass


@dataclass
class UpdateInfo:
    """Result of comparing the running version against the latest release."""

    has_update: bool
    latest_version: str = ""
    release_url: str = ""
    release_notes: str = ""
    error: str | None = None


def normalize_version(tag: str | None) -> str:
    """Strip whitespace and a leading 'v' ("v1.2.4" -> "1.2.4")."""
    if not tag:
        return ""
    tag = tag.strip()
    return tag[1:] if tag.startswith("v") else tag


def evaluate_release(
    current_version: str,
    release: dict | None,
    skipped_version: str | None = None,
) -> UpdateInfo:
    """
    Decide whether a release is an update worth announcing.

    Any differing tag counts as an update; versions are not ordered.
    A tag the user chose to skip is treated as no update.
    """
    if not isinstance(release, dict):
        return UpdateInfo(has_update=False)

    latest_tag = release.get("tag_name") or ""
    latest = normalize_version(latest_tag)
    if not latest or latest == normalize_version(current_version):
        return UpdateInfo(has_update=False, latest_version=latest_tag)

    if skipped_version and normalize_version(skipped_version) == latest:
        return UpdateInfo(has_update=False, latest_version=latest_tag)

    return UpdateInfo(
        has_update=True,
        latest_version=latest_tag,
        release_url=release.get("html_url") or "",
        release_notes=release.get("body") or "",
    )
