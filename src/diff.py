from dataclasses import dataclass, field
from typing import List

from constants import KERNEL_PREFIX, SECURITY_PACKAGES
from models import Package


@dataclass(frozen=True)
class PackageUpdate:
    name: str
    old_version: str
    new_version: str
    is_kernel: bool = False
    is_security: bool = False


@dataclass
class GenerationDiff:
    added: List[Package] = field(default_factory=list)
    removed: List[Package] = field(default_factory=list)
    updated: List[PackageUpdate] = field(default_factory=list)

    def summary(self):
        return (
            f"+{len(self.added)} added · "
            f"-{len(self.removed)} removed · "
            f"~{len(self.updated)} updated"
        )

    def is_empty(self):
        return not (self.added or self.removed or self.updated)


def is_kernel_package(name):
    return name == KERNEL_PREFIX.rstrip("-") or name.startswith(KERNEL_PREFIX)


def is_security_package(name):
    return any(s in name for s in SECURITY_PACKAGES)


def calculate_diff(old_packages, new_packages):
    """Compare two package collections by name.

    Added and removed keep the order of their source collection. A name
    present on both sides with an identical version is left out entirely.
    When a side repeats a name, its last entry wins.
    """
    old_by_name = {pkg.name: pkg for pkg in old_packages}
    new_by_name = {pkg.name: pkg for pkg in new_packages}

    added = [pkg for name, pkg in new_by_name.items() if name not in old_by_name]
    removed = [pkg for name, pkg in old_by_name.items() if name not in new_by_name]

    updated = []
    for name, new_pkg in new_by_name.items():
        old_pkg = old_by_name.get(name)
        if old_pkg is None or old_pkg.version == new_pkg.version:
            continue
        updated.append(
            PackageUpdate(
                name=name,
                old_version=old_pkg.version,
                new_version=new_pkg.version,
                is_kernel=is_kernel_package(name),
                is_security=is_security_package(name),
            )
        )

    return GenerationDiff(added=added, removed=removed, updated=updated)
