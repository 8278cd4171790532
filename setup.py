"""
FileBridge setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="filebridge",
    version="1.0.0",
    description="FileBridge — related files and record describe helpers for a Python application platform",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "filebridge=filebridge.cli:main",
        ],
    },
    install_requires=[
        "sqlalchemy>=2.0",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
