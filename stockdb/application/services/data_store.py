"""Data store: the single authoritative in-memory holder of parts and projects.

A store handle is obtained from ``DataStore.open`` (or the ``open_store``
helper that wires the file adapters). At most one handle is open per process:
opening a new one closes the previous handle first. Every operation on a
closed handle raises NoOpenStoreError.

Mutations follow the same sequence: validate, mutate the in-memory maps,
record a before/after diff in the history log, then notify subscribers.
Nothing is written to disk until ``save`` or ``close``.

The store does no locking. A multithreaded host must serialise every call
behind a single lock of its own.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType, TracebackType
from typing import ClassVar

from stockdb.application.interfaces import StoreRepository
from stockdb.application.schemas import StoreDocument
from stockdb.domain.entities import Material, Part, PartParameter, Project, ProjectVersion
from stockdb.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidParameterError,
    NoOpenStoreError,
    PersistenceError,
)
from stockdb.domain.versioning import is_valid_version
from stockdb.infrastructure.logging.colored_logger import StoreLogger, StoreStage

from .change_notifier import ChangeNotifier, StoreTopic, Subscriber
from .history_log import HistoryLog

logger = logging.getLogger(__name__)
slog = StoreLogger(__name__)


class DataStore:
    """Owns the Parts and Projects collections of one opened dataset."""

    _active: ClassVar["DataStore | None"] = None

    def __init__(
        self,
        repository: StoreRepository,
        *,
        history: HistoryLog | None = None,
        notifier: ChangeNotifier | None = None,
    ):
        """Bind a handle to its collaborators. Prefer ``DataStore.open``, which also loads."""
        self._repository = repository
        self._history = history if history is not None else HistoryLog.disabled()
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self._parts: dict[str, Part] = {}
        self._projects: dict[str, Project] = {}
        self._is_open = False

    # ── Lifecycle ───────────────────────────────────────────────────

    @classmethod
    def open(
        cls,
        repository: StoreRepository,
        *,
        history: HistoryLog | None = None,
        notifier: ChangeNotifier | None = None,
    ) -> "DataStore":
        """Load the dataset, re-persist it in normalised form, and make it the active store.

        Any previously open store is closed (and therefore saved) first.
        """
        cls.close_active()

        store = cls(repository, history=history, notifier=notifier)
        try:
            store._load()
        except Exception:
            store._is_open = False
            raise
        cls._active = store
        return store

    @classmethod
    def close_active(cls) -> None:
        """Close (and save) the open store, if any."""
        previous = cls._active
        if previous is not None and previous.is_open:
            logger.info("Closing open store %s", previous.location)
            previous.close()
        cls._active = None

    @classmethod
    def current(cls) -> "DataStore":
        """Return the open store, or raise NoOpenStoreError."""
        store = cls._active
        if store is None or not store.is_open:
            raise NoOpenStoreError()
        return store

    def _load(self) -> None:
        with slog.timed_step(StoreStage.LOAD, f"Loading {self._repository.location}"):
            document = self._repository.load()
            try:
                parts, projects = document.to_collections()
            except ValueError as exc:
                raise PersistenceError(self._repository.location, str(exc)) from exc

        self._parts = parts
        self._projects = projects
        self._is_open = True
        slog.detail("Dataset loaded", parts=len(parts), projects=len(projects))

        # Re-persist in normalised form
        self.save()

    def close(self) -> None:
        """Save and release the store. Later calls on this handle fail fast."""
        self._require_open()
        self.save()
        self._is_open = False
        self._parts = {}
        self._projects = {}
        if DataStore._active is self:
            DataStore._active = None
        slog.step(StoreStage.LIFECYCLE, f"Closed {self._repository.location}")

    def __enter__(self) -> "DataStore":
        self._require_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._is_open:
            self.close()

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def location(self) -> str:
        return self._repository.location

    def _require_open(self) -> None:
        if not self._is_open:
            raise NoOpenStoreError()

    # ── Persistence ─────────────────────────────────────────────────

    def save(self) -> None:
        """Write parts (by MPN) and projects (by name) atomically, then flush history."""
        self._require_open()
        document = StoreDocument.from_collections(self._parts, self._projects)
        with slog.timed_step(
            StoreStage.SAVE,
            f"Saving {self._repository.location}",
            parts=len(document.parts),
            projects=len(document.projects),
        ):
            self._repository.save(document)
            self._history.save()

    # ── Collaborators ───────────────────────────────────────────────

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def subscribe(self, topic: StoreTopic, callback: Subscriber) -> Callable[[], None]:
        """Register for change notifications. Returns the unsubscribe function."""
        return self._notifier.subscribe(topic, callback)

    def _notify(self, topic: StoreTopic) -> None:
        self._notifier.publish(topic, self)

    # ── Parts ───────────────────────────────────────────────────────

    @property
    def parts(self) -> Mapping[str, Part]:
        """Read-only view of the parts keyed by MPN."""
        self._require_open()
        return MappingProxyType(self._parts)

    def has_part(self, mpn: str) -> bool:
        self._require_open()
        return mpn in self._parts

    def get_part(self, mpn: str) -> Part:
        self._require_open()
        part = self._parts.get(mpn)
        if part is None:
            raise EntityNotFoundError("Part", mpn)
        return part

    def add_part(self, part: Part) -> bool:
        """Insert ``part``. Returns False, leaving the store untouched, if its MPN exists."""
        self._require_open()
        if part.mpn in self._parts:
            slog.rejected(StoreStage.PART, "Add refused: MPN already exists", mpn=part.mpn)
            return False

        self._parts[part.mpn] = part
        self._history.record_insert(part)
        slog.step(StoreStage.PART, "Inserted part", mpn=part.mpn)
        self._notify(StoreTopic.PARTS_CHANGED)
        return True

    def add_parts(self, parts: Iterable[Part]) -> int:
        """Insert many parts, skipping MPNs already present. Notifies once.

        Returns the number of parts inserted.
        """
        self._require_open()
        added = 0
        for part in parts:
            if part.mpn in self._parts:
                slog.rejected(StoreStage.PART, "Bulk add skipped existing MPN", mpn=part.mpn)
                continue
            self._parts[part.mpn] = part
            self._history.record_insert(part)
            added += 1

        if added:
            slog.step(StoreStage.PART, f"Inserted {added} part(s)")
            self._notify(StoreTopic.PARTS_CHANGED)
        return added

    def delete_parts(self, parts_or_mpns: Iterable[Part | str]) -> int:
        """Remove many parts, skipping MPNs not in the store. Notifies once.

        Returns the number of parts removed.
        """
        self._require_open()
        removed = 0
        for item in parts_or_mpns:
            part = self._parts.pop(_mpn_of(item), None)
            if part is None:
                slog.rejected(StoreStage.PART, "Bulk delete skipped missing MPN", mpn=_mpn_of(item))
                continue
            self._history.record_delete(part)
            removed += 1

        if removed:
            slog.step(StoreStage.PART, f"Deleted {removed} part(s)")
            self._notify(StoreTopic.PARTS_CHANGED)
        return removed

    def delete_part(self, part_or_mpn: Part | str) -> bool:
        """Remove a part. Returns False if its MPN is not in the store."""
        self._require_open()
        mpn = _mpn_of(part_or_mpn)
        part = self._parts.pop(mpn, None)
        if part is None:
            slog.rejected(StoreStage.PART, "Delete refused: MPN not found", mpn=mpn)
            return False

        self._history.record_delete(part)
        slog.step(StoreStage.PART, "Deleted part", mpn=mpn)
        self._notify(StoreTopic.PARTS_CHANGED)
        return True

    def edit_part(
        self,
        part_or_mpn: Part | str,
        parameter: PartParameter | str,
        value: str,
    ) -> bool:
        """Change one parameter of a stored part.

        The part is looked up by MPN and the stored instance is edited.
        Returns False if the MPN is not in the store. Raises
        InvalidParameterError for an unknown parameter or an empty MPN and
        DuplicateEntityError when renaming onto an existing MPN; in every
        failure case the part is left unmodified.
        """
        self._require_open()
        mpn = _mpn_of(part_or_mpn)
        part = self._parts.get(mpn)
        if part is None:
            slog.rejected(StoreStage.PART, "Edit refused: MPN not found", mpn=mpn)
            return False

        try:
            param = PartParameter.parse(parameter)
        except ValueError:
            raise InvalidParameterError(parameter) from None

        value = "" if value is None else str(value)
        before = part.clone_for_history()

        if param is PartParameter.MPN:
            if not value.strip():
                raise InvalidParameterError(param.value, "MPN cannot be empty")
            if value != mpn:
                if value in self._parts:
                    raise DuplicateEntityError("Part", "mpn", value)
                del self._parts[mpn]
                part.set(param, value)
                self._parts[value] = part
        else:
            part.set(param, value)

        self._history.record_update(before, part)
        slog.step(StoreStage.PART, "Edited part", mpn=part.mpn, parameter=param.value)
        self._notify(StoreTopic.PARTS_CHANGED)
        return True

    def rename_part(self, old_mpn: str, new_mpn: str) -> bool:
        return self.edit_part(old_mpn, PartParameter.MPN, new_mpn)

    # ── Projects ────────────────────────────────────────────────────

    @property
    def projects(self) -> Mapping[str, Project]:
        """Read-only view of the projects keyed by name."""
        self._require_open()
        return MappingProxyType(self._projects)

    def get_project(self, name: str) -> Project:
        self._require_open()
        project = self._projects.get(name)
        if project is None:
            raise EntityNotFoundError("Project", name)
        return project

    def add_project(self, project: Project) -> bool:
        """Insert a project. Returns False if the name is taken."""
        self._require_open()
        if project.name in self._projects:
            slog.rejected(StoreStage.PROJECT, "Add refused: name already exists", project=project.name)
            return False

        self._projects[project.name] = project
        slog.step(StoreStage.PROJECT, "Added project", project=project.name)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return True

    def delete_project(self, name: str) -> bool:
        self._require_open()
        if self._projects.pop(name, None) is None:
            slog.rejected(StoreStage.PROJECT, "Delete refused: not found", project=name)
            return False

        slog.step(StoreStage.PROJECT, "Deleted project", project=name)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return True

    def rename_project(self, old_name: str, new_name: str) -> bool:
        """Re-key a project. False if ``old_name`` is unknown; DuplicateEntityError on collision."""
        self._require_open()
        project = self._projects.get(old_name)
        if project is None:
            return False
        if not new_name or not new_name.strip():
            raise InvalidParameterError("name", "project name cannot be empty")
        if new_name == old_name:
            return True
        if new_name in self._projects:
            raise DuplicateEntityError("Project", "name", new_name)

        del self._projects[old_name]
        project.name = new_name
        self._projects[new_name] = project
        slog.step(StoreStage.PROJECT, "Renamed project", old=old_name, new=new_name)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return True

    # ── Versions ────────────────────────────────────────────────────

    def add_version(self, project_name: str, version: ProjectVersion | str) -> bool:
        """Add a version to a project. False if the version key already exists.

        Versions that are not dotted numbers are accepted but sort by plain
        string comparison.
        """
        project = self.get_project(project_name)
        if isinstance(version, str):
            version = ProjectVersion(version=version)
        if not version.version:
            raise InvalidParameterError("version", "version cannot be empty")
        if not is_valid_version(version.version):
            logger.warning(
                "Version '%s' of project '%s' is not a dotted number: using string ordering",
                version.version, project_name,
            )

        if not project.add_version(version):
            slog.rejected(StoreStage.PROJECT, "Version already exists", project=project_name, version=version.version)
            return False

        slog.step(StoreStage.PROJECT, "Added version", project=project_name, version=version.version)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return True

    def delete_version(self, project_name: str, version: str) -> bool:
        project = self.get_project(project_name)
        if not project.remove_version(version):
            return False

        slog.step(StoreStage.PROJECT, "Deleted version", project=project_name, version=version)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return True

    def get_version(self, project_name: str, version: str) -> ProjectVersion:
        project = self.get_project(project_name)
        found = project.get_version(version)
        if found is None:
            raise EntityNotFoundError("ProjectVersion", f"{project_name}/{version}")
        return found

    # ── Materials ───────────────────────────────────────────────────

    def add_material(self, project_name: str, version: str, material: Material) -> None:
        target = self.get_version(project_name, version)
        target.materials.append(material)
        slog.step(StoreStage.PROJECT, "Added material", project=project_name, version=version, mpn=material.mpn)
        self._notify(StoreTopic.PROJECTS_CHANGED)

    def remove_material(self, project_name: str, version: str, index: int) -> Material:
        target = self.get_version(project_name, version)
        if not 0 <= index < len(target.materials):
            raise EntityNotFoundError("Material", f"{project_name}/{version}#{index}")

        removed = target.materials.pop(index)
        slog.step(StoreStage.PROJECT, "Removed material", project=project_name, version=version, mpn=removed.mpn)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return removed

    def update_material(
        self,
        project_name: str,
        version: str,
        index: int,
        *,
        mpn: str | None = None,
        quantity: float | None = None,
        reference: str | None = None,
    ) -> Material:
        """Change fields of one BOM line. All values are validated before any is applied."""
        target = self.get_version(project_name, version)
        if not 0 <= index < len(target.materials):
            raise EntityNotFoundError("Material", f"{project_name}/{version}#{index}")
        if mpn is not None and not mpn.strip():
            raise InvalidParameterError("mpn", "MPN cannot be empty")
        if quantity is not None and float(quantity) <= 0:
            raise InvalidParameterError("quantity", "quantity must be positive")

        material = target.materials[index]
        if mpn is not None:
            material.mpn = mpn
        if quantity is not None:
            material.quantity = float(quantity)
        if reference is not None:
            material.reference = reference

        slog.step(StoreStage.PROJECT, "Updated material", project=project_name, version=version, mpn=material.mpn)
        self._notify(StoreTopic.PROJECTS_CHANGED)
        return material

    def resolve_material(self, material: Material) -> Part | None:
        """Return the part a material refers to, or None if the reference is orphaned."""
        self._require_open()
        return self._parts.get(material.mpn)

    def orphaned_materials(self) -> list[tuple[str, str, Material]]:
        """Every (project, version, material) whose MPN is no longer in the store."""
        self._require_open()
        return [
            (project.name, version.version, material)
            for project in self._projects.values()
            for version in project.versions
            for material in version.materials
            if material.mpn not in self._parts
        ]

    def relink_materials(self, old_mpn: str, new_mpn: str) -> int:
        """Point every material referencing ``old_mpn`` at ``new_mpn``. Returns the count."""
        self._require_open()
        count = 0
        for project in self._projects.values():
            for version in project.versions:
                for material in version.materials:
                    if material.mpn == old_mpn:
                        material.mpn = new_mpn
                        count += 1

        if count:
            slog.step(StoreStage.PROJECT, "Relinked materials", old=old_mpn, new=new_mpn, count=count)
            self._notify(StoreTopic.PROJECTS_CHANGED)
        return count


def _mpn_of(part_or_mpn: Part | str) -> str:
    return part_or_mpn.mpn if isinstance(part_or_mpn, Part) else part_or_mpn
