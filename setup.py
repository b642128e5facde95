#!/usr/bin/env python3

from setuptools import setup


def version():
    with open("sobeledge/VERSION","r") as f:
        return f.read().strip()

setup(
    name = "sobeledge",
    version = version(),
    description = "Parallel Sobel edge maps of grayscale images",
    keywords = "edge detection, sobel, image processing",
    packages = ["sobeledge"],
    install_requires = ["numpy", "scipy", "numba"],
    extras_require = {"test": ["pytest"]},
    scripts = ["scripts/sobel-edges.py"],
    python_requires = ">=3.8",
    include_package_data = True,
    package_data = {"sobeledge": ["VERSION"]},
    )
