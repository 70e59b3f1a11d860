"""Domain entities for projects and their bills of materials.

A Project owns versions kept in semantic-version order; each version owns an
ordered list of materials. Materials point at parts by MPN only, so a part
deletion or rename shows up as an unresolvable (orphaned) reference rather
than a dangling object.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from stockdb.domain.versioning import version_sort_key


@dataclass
class Material:
    """One BOM line: a part reference, the quantity needed, and reference designators."""

    mpn: str
    quantity: float = 1.0
    reference: str = ""   # e.g. "R1, R4, R7"

    def __post_init__(self) -> None:
        if not self.mpn or not self.mpn.strip():
            raise ValueError("Material MPN cannot be empty")
        self.quantity = float(self.quantity)
        if self.quantity <= 0:
            raise ValueError(f"Material quantity must be positive, got {self.quantity}")

    def clone(self) -> "Material":
        return replace(self)


@dataclass
class ProjectVersion:
    """A single version of a project's BOM."""

    version: str
    materials: list[Material] = field(default_factory=list)

    def clone(self) -> "ProjectVersion":
        return ProjectVersion(
            version=self.version,
            materials=[m.clone() for m in self.materials],
        )

    def material_mpns(self) -> set[str]:
        return {m.mpn for m in self.materials}


class Project:
    """A named project holding uniquely keyed, semantically ordered versions."""

    def __init__(self, name: str, versions: list[ProjectVersion] | None = None):
        if not name or not name.strip():
            raise ValueError("Project name cannot be empty")
        self.name = name
        self._versions: dict[str, ProjectVersion] = {}
        for version in versions or []:
            if not self.add_version(version):
                raise ValueError(f"Duplicate version '{version.version}' in project '{name}'")

    def __repr__(self) -> str:
        return f"Project(name={self.name!r}, versions={list(self._versions)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Project):
            return NotImplemented
        return self.name == other.name and self.versions == other.versions

    # ── Versions ────────────────────────────────────────────────────

    @property
    def versions(self) -> list[ProjectVersion]:
        """Versions in ascending semantic order."""
        return list(self._versions.values())

    def version_keys(self) -> list[str]:
        return list(self._versions)

    def has_version(self, version: str) -> bool:
        return version in self._versions

    def get_version(self, version: str) -> ProjectVersion | None:
        return self._versions.get(version)

    def add_version(self, version: ProjectVersion) -> bool:
        """Insert a version, keeping the collection sorted. False if the key exists."""
        if version.version in self._versions:
            return False
        items = list(self._versions.items())
        items.append((version.version, version))
        items.sort(key=lambda kv: version_sort_key(kv[0]))
        self._versions = dict(items)
        return True

    def remove_version(self, version: str) -> bool:
        return self._versions.pop(version, None) is not None

    def __iter__(self) -> Iterator[ProjectVersion]:
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self._versions)

    def clone(self) -> "Project":
        return Project(self.name, [v.clone() for v in self.versions])
