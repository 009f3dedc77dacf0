# outer_frontiers/loaders/glb_loader.py
"""GLB/glTF 2.0 loader.

Pure Python implementation without external dependencies (except numpy).

Produces scene graphs in the layout the collider pipeline relies on: every
glTF node becomes a named transform entity, and a node referencing a mesh
gets one mesh-bearing child entity per primitive. Vertex streams are kept
indexed (not expanded) and POSITION stays in the grouped FLOAT32X3 encoding.
"""

from __future__ import annotations

import json
import struct
from pathlib import Path
from typing import List, Optional, Dict

import numpy as np

from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.mesh import Mesh, MeshAssets, VertexAttributeValues, VertexFormat
from outer_frontiers.scene.components import Mesh3d
from outer_frontiers.scene.scene import Scene

GLB_MAGIC = b"glTF"
CHUNK_JSON = 0x4E4F534A
CHUNK_BIN = 0x004E4942


# ---------- DATA CLASSES ----------

class GLBPrimitiveData:
    """One primitive of a glTF mesh."""
    def __init__(self, name: str, vertices: np.ndarray, normals: Optional[np.ndarray],
                 uvs: Optional[np.ndarray], indices: Optional[np.ndarray]):
        self.name = name
        self.vertices = vertices  # (N, 3) float32
        self.normals = normals
        self.uvs = uvs
        self.indices = indices    # flat uint32 or None for non-indexed geometry


class GLBNodeData:
    """Node in scene hierarchy."""
    def __init__(self, name: str, children: List[int], mesh_index: Optional[int],
                 translation: np.ndarray, rotation: np.ndarray, scale: np.ndarray):
        self.name = name
        self.children = children
        self.mesh_index = mesh_index
        self.translation = translation  # [x, y, z]
        self.rotation = rotation        # [x, y, z, w] quaternion
        self.scale = scale              # [x, y, z]

    def pose(self) -> GeneralPose3:
        return GeneralPose3(ang=self.rotation, lin=self.translation, scale=self.scale)


class GLBSceneData:
    """Parsed content of a GLB file."""
    def __init__(self):
        self.nodes: List[GLBNodeData] = []
        # glTF mesh index -> its primitives
        self.meshes: Dict[int, List[GLBPrimitiveData]] = {}
        # root node indices of every glTF scene, in file order
        self.scenes: List[List[int]] = []
        self.default_scene: int = 0


# ---------- ACCESSOR HELPERS ----------

COMPONENT_TYPE_SIZE = {
    5120: 1,  # BYTE
    5121: 1,  # UNSIGNED_BYTE
    5122: 2,  # SHORT
    5123: 2,  # UNSIGNED_SHORT
    5125: 4,  # UNSIGNED_INT
    5126: 4,  # FLOAT
}

COMPONENT_TYPE_DTYPE = {
    5120: np.int8,
    5121: np.uint8,
    5122: np.int16,
    5123: np.uint16,
    5125: np.uint32,
    5126: np.float32,
}

TYPE_NUM_COMPONENTS = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}


def _read_accessor(gltf: dict, bin_data: bytes, accessor_index: int) -> np.ndarray:
    """Read data from an accessor, keeping its component type."""
    accessor = gltf["accessors"][accessor_index]
    component_type = accessor["componentType"]
    accessor_type = accessor["type"]
    count = accessor["count"]

    dtype = COMPONENT_TYPE_DTYPE[component_type]
    num_components = TYPE_NUM_COMPONENTS[accessor_type]

    if "bufferView" not in accessor:
        # Accessor without a buffer view is all zeros
        data = np.zeros((count, num_components), dtype=dtype)
        return data.reshape(-1) if num_components == 1 else data

    buffer_view = gltf["bufferViews"][accessor["bufferView"]]
    byte_offset = buffer_view.get("byteOffset", 0) + accessor.get("byteOffset", 0)
    byte_stride = buffer_view.get("byteStride", 0)

    element_size = COMPONENT_TYPE_SIZE[component_type] * num_components
    end = byte_offset + (count - 1) * max(byte_stride, element_size) + element_size
    if count > 0 and end > len(bin_data):
        raise ValueError(f"Accessor {accessor_index} reads past the end of the binary chunk")

    if byte_stride == 0 or byte_stride == element_size:
        # Tightly packed
        data = np.frombuffer(
            bin_data, dtype=dtype,
            offset=byte_offset,
            count=count * num_components
        )
        if num_components > 1:
            data = data.reshape(count, num_components)
    else:
        # Strided data
        data = np.zeros((count, num_components), dtype=dtype)
        for i in range(count):
            offset = byte_offset + i * byte_stride
            data[i] = np.frombuffer(bin_data, dtype=dtype, offset=offset, count=num_components)

    return data.copy()


# ---------- PARSING FUNCTIONS ----------

def _parse_meshes(gltf: dict, bin_data: bytes, scene_data: GLBSceneData):
    """Parse all meshes from glTF. Primitives without positions are skipped."""
    for mesh_idx, mesh in enumerate(gltf.get("meshes", [])):
        mesh_name = mesh.get("name", f"Mesh_{mesh_idx}")
        primitives = []

        for prim_idx, primitive in enumerate(mesh.get("primitives", [])):
            attributes = primitive.get("attributes", {})

            # Vertices (required)
            if "POSITION" not in attributes:
                continue
            vertices = _read_accessor(gltf, bin_data, attributes["POSITION"]).astype(np.float32)

            normals = None
            if "NORMAL" in attributes:
                normals = _read_accessor(gltf, bin_data, attributes["NORMAL"]).astype(np.float32)

            uvs = None
            if "TEXCOORD_0" in attributes:
                uvs = _read_accessor(gltf, bin_data, attributes["TEXCOORD_0"]).astype(np.float32)

            indices = None
            if "indices" in primitive:
                indices = _read_accessor(gltf, bin_data, primitive["indices"]).astype(np.uint32).reshape(-1)

            primitives.append(GLBPrimitiveData(
                name=f"{mesh_name}.{prim_idx}",
                vertices=vertices,
                normals=normals,
                uvs=uvs,
                indices=indices,
            ))

        scene_data.meshes[mesh_idx] = primitives


def _parse_nodes(gltf: dict, scene_data: GLBSceneData):
    """Parse node hierarchy."""
    for node_idx, node in enumerate(gltf.get("nodes", [])):
        name = node.get("name", f"Node_{node_idx}")
        children = node.get("children", [])
        mesh_index = node.get("mesh")

        if "matrix" in node:
            # Column-major 4x4
            matrix = np.array(node["matrix"], dtype=np.float64).reshape(4, 4).T
            pose = GeneralPose3.from_matrix(matrix)
            translation, rotation, scale = pose.lin, pose.ang, pose.scale
        else:
            translation = np.array(node.get("translation", [0, 0, 0]), dtype=np.float64)
            rotation = np.array(node.get("rotation", [0, 0, 0, 1]), dtype=np.float64)  # xyzw
            scale = np.array(node.get("scale", [1, 1, 1]), dtype=np.float64)

        scene_data.nodes.append(GLBNodeData(
            name=name,
            children=children,
            mesh_index=mesh_index,
            translation=translation,
            rotation=rotation,
            scale=scale,
        ))

    scene_data.scenes = [s.get("nodes", []) for s in gltf.get("scenes", [])]
    scene_data.default_scene = gltf.get("scene", 0)
    if not scene_data.scenes and scene_data.nodes:
        # No scenes declared: every node that is nobody's child is a root
        child_ids = {c for n in scene_data.nodes for c in n.children}
        scene_data.scenes = [[i for i in range(len(scene_data.nodes)) if i not in child_ids]]


def parse_glb(data: bytes) -> GLBSceneData:
    """Parse GLB container bytes into scene data."""
    if len(data) < 12:
        raise ValueError("File too small to be valid GLB")

    magic = data[0:4]
    if magic != GLB_MAGIC:
        raise ValueError(f"Invalid GLB magic: {magic}")

    version, length = struct.unpack("<II", data[4:12])
    if version != 2:
        raise ValueError(f"Unsupported glTF version: {version}")

    # Parse chunks
    offset = 12
    json_data = None
    bin_data = None

    while offset < len(data):
        if offset + 8 > len(data):
            break

        chunk_length, chunk_type = struct.unpack("<II", data[offset:offset + 8])
        chunk_data = data[offset + 8:offset + 8 + chunk_length]

        if chunk_type == CHUNK_JSON:
            json_data = chunk_data.decode("utf-8")
        elif chunk_type == CHUNK_BIN:
            bin_data = chunk_data

        # Align to 4 bytes
        offset += 8 + chunk_length
        offset = (offset + 3) & ~3

    if json_data is None:
        raise ValueError("No JSON chunk found in GLB")

    gltf = json.loads(json_data)
    bin_data = bin_data or b""

    scene_data = GLBSceneData()
    _parse_nodes(gltf, scene_data)
    _parse_meshes(gltf, bin_data, scene_data)
    return scene_data


def load_glb_file(path: str | Path) -> GLBSceneData:
    """Load a GLB file and return scene data.

    Args:
        path: Path to .glb file

    Returns:
        GLBSceneData containing nodes, meshes and scenes
    """
    with open(Path(path), "rb") as f:
        return parse_glb(f.read())


# ---------- SCENE BUILDING ----------

def primitive_to_mesh(primitive: GLBPrimitiveData) -> Mesh:
    mesh = Mesh(primitive.indices)
    mesh.insert_attribute(Mesh.ATTRIBUTE_POSITION,
                          VertexAttributeValues(VertexFormat.FLOAT32X3, primitive.vertices))
    if primitive.normals is not None:
        mesh.insert_attribute(Mesh.ATTRIBUTE_NORMAL,
                              VertexAttributeValues(VertexFormat.FLOAT32X3, primitive.normals))
    if primitive.uvs is not None:
        mesh.insert_attribute(Mesh.ATTRIBUTE_UV_0,
                              VertexAttributeValues(VertexFormat.FLOAT32X2, primitive.uvs))
    return mesh


def build_scene(scene_data: GLBSceneData, scene_index: int, meshes: MeshAssets,
                source: str = "") -> Scene:
    """Build a Scene for one glTF scene of the parsed file.

    Meshes are added to ``meshes`` once per primitive, even when several
    nodes share them.
    """
    if not 0 <= scene_index < len(scene_data.scenes):
        raise ValueError(f"Scene{scene_index} is not present in {source or 'GLB data'} "
                         f"({len(scene_data.scenes)} scenes)")

    mesh_handles: Dict[int, list] = {}
    scene = Scene()

    def add_node(node_idx: int, parent: Optional[int]):
        node = scene_data.nodes[node_idx]
        eid = scene.add_node(node.name, node.pose(), parent)

        if node.mesh_index is not None:
            if node.mesh_index not in mesh_handles:
                mesh_handles[node.mesh_index] = [
                    meshes.add(primitive_to_mesh(p), f"{source}#Mesh{node.mesh_index}/{p.name}")
                    for p in scene_data.meshes.get(node.mesh_index, [])
                ]
            primitives = scene_data.meshes.get(node.mesh_index, [])
            for primitive, handle in zip(primitives, mesh_handles[node.mesh_index]):
                scene.add_node(primitive.name, parent=eid, mesh=Mesh3d(handle))

        for child_idx in node.children:
            add_node(child_idx, eid)

    for root_idx in scene_data.scenes[scene_index]:
        add_node(root_idx, None)

    return scene
