"""setuptools packaging for RepClock.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="RepClock",
    version="0.1.0",
    description="Workout session timer with exercise and rest tracking.",
    packages=find_packages(include=["repclock", "repclock.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["repclock=repclock.__main__:main"],
    },
)
