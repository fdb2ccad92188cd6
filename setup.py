#!/usr/bin/env python3
"""Setup script for vocabart package."""

from setuptools import setup, find_packages

setup(
    name="vocabart",
    version="0.1.0",
    description="Printable picture flashcards from term:definition lists, illustrated by Gemini",
    author="Vocabart Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.0.0",
        "Pillow>=10.0.0",
        "PyYAML>=6.0",
        "aiohttp>=3.9.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "vocabart=vocabart.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
