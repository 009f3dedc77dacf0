"""Mesh container with named vertex attributes and their encodings."""

from __future__ import annotations

from enum import Enum

import numpy as np

from outer_frontiers.core.assets import Assets


class VertexFormat(Enum):
    """Storage encoding of a vertex attribute stream."""
    FLOAT32 = "float32"        # flat scalar stream, e.g. x0, y0, z0, x1, y1, z1, ...
    FLOAT32X2 = "float32x2"
    FLOAT32X3 = "float32x3"    # one row per vertex: (N, 3)


_FORMAT_DTYPE = {
    VertexFormat.FLOAT32: np.float32,
    VertexFormat.FLOAT32X2: np.float32,
    VertexFormat.FLOAT32X3: np.float32,
}

_FORMAT_WIDTH = {
    VertexFormat.FLOAT32: 1,
    VertexFormat.FLOAT32X2: 2,
    VertexFormat.FLOAT32X3: 3,
}


class VertexAttributeValues:
    """Attribute data together with the encoding it is stored in."""

    def __init__(self, fmt: VertexFormat, data):
        width = _FORMAT_WIDTH[fmt]
        data = np.asarray(data, dtype=_FORMAT_DTYPE[fmt])
        if width == 1:
            data = data.reshape(-1)
        elif data.ndim != 2 or data.shape[1] != width:
            raise ValueError(f"{fmt.value} attribute must be a Nx{width} array, got shape {data.shape}")
        self.format = fmt
        self.data = data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self):
        return f"VertexAttributeValues({self.format.value}, len={len(self.data)})"


class Mesh:
    """Triangle mesh as a set of named attribute streams plus optional indices.

    Attribute names follow glTF semantics (``POSITION``, ``NORMAL``, ...).
    """

    ATTRIBUTE_POSITION = "POSITION"
    ATTRIBUTE_NORMAL = "NORMAL"
    ATTRIBUTE_UV_0 = "TEXCOORD_0"

    def __init__(self, indices: np.ndarray | None = None):
        self._attributes: dict[str, VertexAttributeValues] = {}
        self.indices = np.asarray(indices, dtype=np.uint32).reshape(-1) if indices is not None else None

    @staticmethod
    def from_positions(vertices, indices=None) -> "Mesh":
        """Mesh with a grouped (FLOAT32X3) position stream."""
        mesh = Mesh(indices)
        mesh.insert_attribute(Mesh.ATTRIBUTE_POSITION,
                              VertexAttributeValues(VertexFormat.FLOAT32X3, vertices))
        return mesh

    def insert_attribute(self, name: str, values: VertexAttributeValues):
        self._attributes[name] = values

    def attribute(self, name: str) -> VertexAttributeValues | None:
        return self._attributes.get(name)

    def remove_attribute(self, name: str) -> VertexAttributeValues | None:
        return self._attributes.pop(name, None)

    def attribute_names(self) -> list[str]:
        return list(self._attributes)

    def __repr__(self):
        attrs = ", ".join(f"{k}={v.format.value}" for k, v in self._attributes.items())
        return f"Mesh({attrs})"


class MeshAssets(Assets[Mesh]):
    """Loaded meshes addressed by Handle."""
