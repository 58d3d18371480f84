"""
Setup script for tiny-spell.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-spell",
    version="0.1.0",
    packages=find_packages(include=["tiny_spell", "tiny_spell.*"]),
    package_data={"tiny_spell": ["py.typed"]},
    python_requires=">=3.8",
    install_requires=["click>=8.0"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["tiny-spell = tiny_spell.cli:main"]},
)
