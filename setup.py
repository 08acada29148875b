"""Install the PyComod package."""

from setuptools import setup

setup(
    name="pycomod",
    version="0.1.0dev",
    package_dir={"": "src"},
    packages=[
        "pycomod",
        "pycomod.cfc",
        "pycomod.utils",
    ],
    python_requires=">=3.10",
    install_requires=[
        "joblib>=1.2",
        "matplotlib>=3.6",
        "mne>=1.7",
        "numpy>=1.22",
        "scipy>=1.8",
        "numba>=0.56",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
