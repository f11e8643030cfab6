# core/catalog.py: read-only material catalog handed to pricing/aggregate calls

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from core.errors import NotFoundError


@dataclass(frozen=True)
class MaterialInfo:
    id: str
    name: str
    rate_per_sqft: float
    project_type_id: str


@dataclass(frozen=True)
class MaterialCatalog:
    materials: Mapping[str, MaterialInfo] = field(default_factory=dict)

    @classmethod
    def from_materials(cls, materials: Iterable) -> "MaterialCatalog":
        """Build from ORM rows or any objects exposing the MaterialInfo attributes."""
        return cls({
            m.id: MaterialInfo(
                id=m.id,
                name=m.name,
                rate_per_sqft=float(m.rate_per_sqft),
                project_type_id=m.project_type_id,
            )
            for m in materials
        })

    def get(self, material_id: str | None) -> MaterialInfo | None:
        if material_id is None:
            return None
        return self.materials.get(material_id)

    def require(self, material_id: str) -> MaterialInfo:
        material = self.get(material_id)
        if material is None:
            raise NotFoundError("Material", material_id)
        return material

    def __len__(self) -> int:
        return len(self.materials)
