import re
from typing import Iterable, List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def humanize(key: str) -> str:
    """
    "derivadosPor" -> "DERIVADOS POR", "vida_diaria" -> "VIDA DIARIA"
    """
    return _CAMEL_BOUNDARY.sub(" ", key).replace("_", " ").upper()


class GroupField(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Tuple[str, ...] = Field(min_length=1)
    namespace_key: str = Field(min_length=1)
    label: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or humanize(self.path[-1])


class GroupSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    rows: Tuple[GroupField, ...]


class GroupSchema(BaseModel):
    """
    Declarative mapping of a nested backend object to flat extension keys. Sections only group
    fields for the narrative; the paths inside them are absolute.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: int = Field(default=1, ge=1)
    sections: Tuple[GroupSection, ...]

    @model_validator(mode="after")
    def validate_paths(self) -> "GroupSchema":
        paths = [f.path for f in self.entries]
        keys = [f.namespace_key for f in self.entries]

        duplicates = {k for k in keys if keys.count(k) > 1}
        if duplicates:
            raise ValueError(f"Duplicate namespace keys in schema {self.name}: {sorted(duplicates)}")

        for path in paths:
            for other in paths:
                if path != other and other[: len(path)] == path:
                    raise ValueError(
                        f"Path {'.'.join(path)} in schema {self.name} is a prefix of {'.'.join(other)}"
                    )
            if paths.count(path) > 1:
                raise ValueError(f"Duplicate path {'.'.join(path)} in schema {self.name}")

        return self

    @property
    def entries(self) -> List[GroupField]:
        return [f for section in self.sections for f in section.rows]

    @property
    def namespace_keys(self) -> List[str]:
        return [f.namespace_key for f in self.entries]

    @classmethod
    def from_table(
        cls,
        name: str,
        version: int,
        table: Sequence[Tuple[str, str, Iterable[Tuple[str, str]]]],
    ) -> "GroupSchema":
        """
        Builds a schema from rows of (section title, dotted section path, [(leaf, namespace key)]).
        """
        sections = []
        for title, section_path, leaves in table:
            prefix = tuple(p for p in section_path.split(".") if p)
            rows = tuple(
                GroupField(path=prefix + tuple(leaf.split(".")), namespace_key=key)
                for leaf, key in leaves
            )
            sections.append(GroupSection(title=title, rows=rows))

        return cls(name=name, version=version, sections=tuple(sections))
