"""Workspace directory layout: target and manifests directories per profile."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

MANIFESTS_DIR = "manifests"
MANIFESTS_BASE_DIR = "base"
DEFAULT_PROFILES = ("dev", "release")

PathLike = Union[str, "os.PathLike[str]"]


class ProfileSpec(enum.Enum):
    """Select the workspace's current profile or every profile."""

    WORKSPACE_CURRENT = "workspace_current"
    ALL = "all"


class WorkspaceError(ValueError):
    """Raised when the workspace configuration is not usable."""


def children(root: PathLike, sub_dirs: Iterable[PathLike]) -> Path:
    """Return ``root`` joined with each of ``sub_dirs`` in turn."""
    return Path(root).joinpath(*sub_dirs)


def list_files(root: PathLike) -> list[str]:
    """Return the names of the regular files directly inside ``root``, sorted."""
    with os.scandir(root) as entries:
        return sorted(entry.name for entry in entries if entry.is_file())


@dataclass
class Workspace:
    """A project described by its manifest file and its declared profiles."""

    manifest_path: Path
    profile: str = "dev"
    profiles: tuple[str, ...] = DEFAULT_PROFILES
    target_dir: Optional[Path] = field(default=None)

    def __post_init__(self) -> None:
        self.manifest_path = Path(self.manifest_path)
        self.profiles = tuple(self.profiles)
        if self.target_dir is None:
            self.target_dir = self.root / "target"
        else:
            self.target_dir = Path(self.target_dir)

    @property
    def root(self) -> Path:
        """The directory holding the manifest file."""
        return self.manifest_path.parent

    def current_profile(self) -> str:
        """Return the selected profile, which must be declared."""
        if not self.profile:
            raise WorkspaceError("profile name must not be empty")
        if self.profile not in self.profiles:
            raise WorkspaceError(
                f"workspace `{self.root.name}` has no profile `{self.profile}`"
            )
        return self.profile

    def target_dir_profile(self) -> Path:
        """Return the target directory for the current profile."""
        return self.target_dir / self.current_profile()

    def manifests_dir(self) -> Path:
        """Return the manifests directory next to the manifest file."""
        return self.root / MANIFESTS_DIR

    def manifests_dir_profile(self) -> Path:
        """Return the manifests directory for the current profile."""
        return self.manifests_dir() / self.current_profile()

    def base_manifests_dir_profile(self) -> Path:
        """Return the base manifests directory for the current profile."""
        return children(self.manifests_dir(), [self.current_profile(), MANIFESTS_BASE_DIR])

    def profile_check(self) -> None:
        """Raise ``WorkspaceError`` if the current profile is not usable."""
        try:
            self.current_profile()
        except WorkspaceError as exc:
            message = str(exc)
            if "has no profile" in message:
                parts = message.split("`")
                if len(parts) > 3:
                    name = parts[3]
                    raise WorkspaceError(
                        f"Profile '{name}' not found in workspace. Consider adding "
                        f"[profile.{name}] to your Scarb.toml to declare the profile."
                    ) from exc
            raise WorkspaceError(f"Profile check failed: {message}") from exc