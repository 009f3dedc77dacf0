"""
Outer Frontiers - simulation support for a 3D space game.

Main modules:
- core - ECS world, asset storage and the frame-stepped App
- scene - scene graphs, instantiation of scene assets
- colliders - compound convex colliders synthesized from model hull nodes
- weapon - fixed-rate weapon fire and projectiles
- assets - model collection, asset server and loading state
"""

__version__ = '0.1.0'
