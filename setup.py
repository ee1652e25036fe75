#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup

def get_README():
    content = ""
    with open("README.md") as f:
        content += f.read()
    return content

setup(
    name="intmod",
    python_requires=">=3.7",
    version="0.1.0",
    license="BSD",
    description="Integers modulo N with overflow-safe fixed-width arithmetic.",
    long_description=get_README(),
    long_description_content_type="text/markdown",
    packages=["intmod"],
    package_data={"intmod": ["py.typed"]},
    zip_safe=False,
    install_requires=[],
    extras_require={
        "test": ["mypy>=0.812"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
    ],
)
