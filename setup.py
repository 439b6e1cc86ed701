#!/usr/bin/env python3
"""
Setup script for occsketch - workplanes and 2D sketches over OpenCASCADE.
"""

import pathlib

from setuptools import find_packages, setup

# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
README = (
    (HERE / "README.md").read_text(encoding="utf-8")
    if (HERE / "README.md").exists()
    else "Rigid transforms, workplanes and sketch builders for OpenCASCADE."
)

setup(
    name="occsketch",
    version="0.1.0",
    description="Rigid transforms, workplanes and sketch builders for OpenCASCADE",
    long_description=README,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["occsketch", "occsketch.*"]),
    python_requires=">=3.9",
    install_requires=[
        # Core dependencies
        "numpy>=1.20.0",
        # OpenCASCADE kernel bindings (imported as OCP)
        "cadquery-ocp>=7.7.0,<8",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
            "black>=21.0.0",
            "flake8>=3.8.0",
            "mypy>=0.800",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Computer Aided Design (CAD)",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="cad, geometry, 3d, workplane, sketch, opencascade",
    include_package_data=True,
    zip_safe=False,
)
