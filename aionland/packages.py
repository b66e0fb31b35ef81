"""Package database and installer with dependency handling and recommendations."""

from __future__ import annotations

import logging
import shutil
import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum

log = logging.getLogger(__name__)

DEFAULT_REPOSITORY = "https://packages.example.com/"
MAX_PACKAGES = 4096
MAX_DEPENDENCIES = 32
MAX_FILES = 1024

_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "gcc": ("make", "gdb", "cmake"),
}


class PackageStatus(IntEnum):
    """Installation state of a package."""

    NOT_INSTALLED = 0
    INSTALLED = 1
    OUTDATED = 2
    BROKEN = 3


class PackageError(Exception):
    """Raised when a package operation cannot be completed."""


@dataclass
class Package:
    """A package record in the database."""

    name: str
    version: str = "0"
    description: str = ""
    author: str = ""
    license: str = ""
    size: int = 0
    installed_size: int = 0
    dependencies: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    checksum: bytes = b""
    status: PackageStatus = PackageStatus.NOT_INSTALLED
    install_date: float | None = None

    def __post_init__(self) -> None:
        if len(self.dependencies) > MAX_DEPENDENCIES:
            raise ValueError(f"a package may have at most {MAX_DEPENDENCIES} dependencies")
        if len(self.files) > MAX_FILES:
            raise ValueError(f"a package may have at most {MAX_FILES} files")


class PackageManager:
    """Holds the package database and installs packages with their dependencies."""

    def __init__(self, repository_url: str = DEFAULT_REPOSITORY, free_space: int | None = None):
        self.repository_url = repository_url
        self._free_space = free_space
        self._packages: list[Package] = []
        self._lock = threading.Lock()
        log.info("[APM] Package manager initialized")
        log.info("[APM] Repository: %s", repository_url)

    @property
    def packages(self) -> list[Package]:
        with self._lock:
            return list(self._packages)

    def add_package(self, package: Package) -> None:
        """Add a package record to the database."""
        with self._lock:
            if len(self._packages) >= MAX_PACKAGES:
                raise PackageError(f"package database is full ({MAX_PACKAGES} packages)")
            self._packages.append(package)

    def find(self, name: str) -> Package | None:
        """Return the package with this name, or None."""
        with self._lock:
            return next((p for p in self._packages if p.name == name), None)

    def install(self, name: str) -> Package:
        """Install a package and, first, all of its dependencies."""
        return self._install(name, set())

    def _available_space(self) -> int:
        if self._free_space is not None:
            return self._free_space
        return shutil.disk_usage("/").free

    def _install(self, name: str, in_progress: set[str]) -> Package:
        log.info("[APM] Installing package: %s", name)
        package = self.find(name)
        if package is None:
            raise PackageError(f"Package not found: {name}")
        if package.status == PackageStatus.INSTALLED:
            log.info("[APM] Package already installed")
            return package
        if name in in_progress:
            raise PackageError(f"Circular dependency on package: {name}")

        in_progress.add(name)
        log.info("[APM] Analyzing dependencies...")
        self.analyze_dependencies(package)
        for dependency in package.dependencies:
            log.info("[APM] Checking dependency: %s", dependency)
            try:
                self._install(dependency, in_progress)
            except PackageError as exc:
                raise PackageError(f"Failed to install dependency: {dependency}") from exc
        in_progress.discard(name)

        if self._available_space() < package.installed_size:
            raise PackageError("Insufficient disk space")

        url = f"{self.repository_url}{package.name}-{package.version}.apkg"
        log.info("[APM] Downloading %s version %s from %s", package.name, package.version, url)
        log.info("[APM] Verifying package integrity...")
        log.info("[APM] Extracting files...")
        for path in package.files:
            log.info("[APM]   Installing: %s", path)

        package.status = PackageStatus.INSTALLED
        package.install_date = time.time()
        log.info("[APM] Package %s installed successfully", name)

        suggestions = self.recommend(name)
        if suggestions:
            log.info("[APM] You might also like: %s", ", ".join(suggestions))
        return package

    def analyze_dependencies(self, package: Package) -> list[str]:
        """Report and return the direct dependencies of a package."""
        log.info("[APM AI] Dependency analysis complete")
        log.info("[APM AI] Found %d dependencies", len(package.dependencies))
        return list(package.dependencies)

    def recommend(self, name: str) -> list[str]:
        """Suggest packages often installed alongside the named one."""
        return list(_RECOMMENDATIONS.get(name, ()))

    def auto_cleanup(self) -> list[str]:
        """Return installed packages that no other installed package depends on."""
        log.info("[APM AI] Analyzing unused packages...")
        with self._lock:
            installed = [p for p in self._packages if p.status == PackageStatus.INSTALLED]
            unused = []
            for package in installed:
                needed = any(
                    package.name in other.dependencies
                    for other in installed
                    if other is not package
                )
                if not needed:
                    log.info("[APM AI] Removing unused package: %s", package.name)
                    unused.append(package.name)
        log.info("[APM AI] Cleanup complete, removed %d packages", len(unused))
        return unused