"""setuptools packaging for RoundTimer.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="RoundTimer",
    version="0.1.0",
    description="Drift-free single-round countdown timer",
    packages=find_packages(include=["roundtimer", "roundtimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "gui_scripts": ["roundtimer = roundtimer.__main__:main"],
    },
)
