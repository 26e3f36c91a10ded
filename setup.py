"""Setup configuration for the jigsaw-engine package."""

from setuptools import find_packages, setup

setup(
    name="jigsaw-engine",
    version="0.1.0",
    packages=find_packages(include=["jigsaw_engine", "jigsaw_engine.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "matplotlib",
        "pillow",
        "pydantic",
        "pydantic-settings",
    ],
    entry_points={
        "console_scripts": [
            "jigsaw-engine=jigsaw_engine.__main__:main",
        ],
    },
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
)
