#!/usr/bin/env python3
from setuptools import setup
import os
import re

short_description = "Python module for reading X-Midas BLUE files."

with open("README.md", encoding="utf-8") as handle:
    long_description = handle.read()

with open(os.path.join("bluefile", "__init__.py"), encoding="utf-8") as handle:
    version = re.search(r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]', handle.read()).group(1)

setup(
    name="bluefile",
    version=version,
    description=short_description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GNU Lesser General Public License v3 or later (LGPLv3+)",
    classifiers=[
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    entry_points={
        "console_scripts": [
            "bluejay = bluefile.apps.bluejay:main",
        ]
    },
    packages=["bluefile", "bluefile.apps"],
    python_requires=">=3.8",
    install_requires=["numpy", "packaging", "pydantic>=2"],
    extras_require={"test": ["pytest>3", "hypothesis"]},
    zip_safe=False,
)
