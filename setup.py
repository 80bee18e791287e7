"""Setup script for hubreg."""

from setuptools import find_packages, setup

requires = [
    "click>=8.1",
    "dependency-injector>=4.41",
    "pydantic>=2.5",
    "pydantic-settings>=2.1",
    "tomli>=2.0; python_version < '3.11'",
]

test_requires = [
    "pytest>=7.4",
]

setup(
    name="hubreg",
    version="0.1.0",
    description="Register genomic track hubs with a Track Hub Registry",
    python_requires=">=3.10",
    packages=find_packages(include=["hubreg", "hubreg.*"]),
    install_requires=requires,
    extras_require={
        "test": test_requires,
    },
    entry_points={
        "console_scripts": [
            "hubreg = hubreg.__main__:main",
        ],
    },
)
