"""Pydantic schemas for the persisted store document (parts + projects)."""

from pydantic import BaseModel, Field

from stockdb.domain.entities import Material, Part, Project, ProjectVersion


class PartRecord(BaseModel):
    """One part with its full parameter set, every value as text."""

    mpn: str = Field(..., min_length=1)
    manufacturer: str = ""
    description: str = ""
    category: str = ""
    location: str = ""
    stock: str = ""
    low_stock: str = ""
    price: str = ""
    supplier: str = ""
    spn: str = ""

    @classmethod
    def from_entity(cls, part: Part) -> "PartRecord":
        return cls(**{param.value: value for param, value in part.parameters.items()})

    def to_entity(self) -> Part:
        return Part(**self.model_dump())


class MaterialRecord(BaseModel):
    mpn: str = Field(..., min_length=1)
    quantity: float = Field(1.0, gt=0)
    reference: str = ""


class VersionRecord(BaseModel):
    version: str = Field(..., min_length=1)
    materials: list[MaterialRecord] = Field(default_factory=list)


class ProjectRecord(BaseModel):
    name: str = Field(..., min_length=1)
    versions: list[VersionRecord] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectRecord":
        return cls(
            name=project.name,
            versions=[
                VersionRecord(
                    version=v.version,
                    materials=[
                        MaterialRecord(mpn=m.mpn, quantity=m.quantity, reference=m.reference)
                        for m in v.materials
                    ],
                )
                for v in project.versions
            ],
        )

    def to_entity(self) -> Project:
        return Project(
            self.name,
            [
                ProjectVersion(
                    version=v.version,
                    materials=[
                        Material(mpn=m.mpn, quantity=m.quantity, reference=m.reference)
                        for m in v.materials
                    ],
                )
                for v in self.versions
            ],
        )


class StoreDocument(BaseModel):
    """The whole persisted dataset.

    Parts are sorted by MPN and projects by name; versions inside a project
    follow semantic-version order.
    """

    parts: list[PartRecord] = Field(default_factory=list)
    projects: list[ProjectRecord] = Field(default_factory=list)

    @classmethod
    def from_collections(
        cls, parts: dict[str, Part], projects: dict[str, Project]
    ) -> "StoreDocument":
        return cls(
            parts=[PartRecord.from_entity(parts[k]) for k in sorted(parts)],
            projects=[ProjectRecord.from_entity(projects[k]) for k in sorted(projects)],
        )

    def to_collections(self) -> tuple[dict[str, Part], dict[str, Project]]:
        """Rebuild the keyed collections. Raises ValueError on duplicate keys."""
        parts: dict[str, Part] = {}
        for record in self.parts:
            if record.mpn in parts:
                raise ValueError(f"Duplicate part MPN '{record.mpn}' in document")
            parts[record.mpn] = record.to_entity()

        projects: dict[str, Project] = {}
        for record in self.projects:
            if record.name in projects:
                raise ValueError(f"Duplicate project name '{record.name}' in document")
            projects[record.name] = record.to_entity()
        return parts, projects
