#!/usr/bin/env python3

from setuptools import setup, find_packages
import os


directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="outer-frontiers",
        packages=find_packages(include=["outer_frontiers", "outer_frontiers.*"]),
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="Collider synthesis and weapon fire scheduling for a 3D space game",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["gamedev", "colliders", "ecs"],
        classifiers=[],
        install_requires=[
            "numpy",
            "scipy",
        ],
        extras_require={
            "test": ["pytest"],
        },
        zip_safe=False,
    )
