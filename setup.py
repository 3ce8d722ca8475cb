from __future__ import annotations

from setuptools import find_packages, setup


def load_dependencies() -> list[str]:
    """Assemble install_requires for the navigation engine."""
    return [
        # Vector and quaternion math
        "numpy>=1.24.0",
        # Data handling
        "pydantic>=2.0.0",
    ]


setup(
    name="autonavigation",
    version="0.1.0",
    description="Camera path navigation engine: path compilation and frame-driven playback",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=load_dependencies(),
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
