"""setuptools packaging for Typing RPG.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="typerpg",
    version="0.1.0",
    description="Typing game scoring, XP progression and daily challenge backend",
    packages=find_packages(include=["typerpg", "typerpg.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["typerpg=typerpg.__main__:main"],
    },
)
