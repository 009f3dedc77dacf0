from .mesh import Mesh, MeshAssets, VertexAttributeValues, VertexFormat

__all__ = ["Mesh", "MeshAssets", "VertexAttributeValues", "VertexFormat"]
