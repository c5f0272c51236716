# The MIT License (MIT)
# Copyright © 2025 zefboot contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software.
#
# THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO
# THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION
# OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

import codecs
import os
import re
from io import open
from os import path

from setuptools import find_packages, setup


def read_requirements(file_path: str):
    with open(file_path, "r", encoding="utf-8") as handle:
        return [
            line.strip()
            for line in handle.readlines()
            if line.strip() and not line.startswith("#")
        ]


here = path.abspath(path.dirname(__file__))
requirements = read_requirements(path.join(here, "requirements.txt"))
test_requirements = read_requirements(path.join(here, "requirements-dev.txt"))

with open(path.join(here, "README.md"), encoding="utf-8") as readme:
    long_description = readme.read()

with codecs.open(
    os.path.join(here, "zefboot/__init__.py"), encoding="utf-8"
) as init_file:
    version_match = re.search(
        r"^__version__ = ['\"]([^'\"]*)['\"]", init_file.read(), re.M
    )
    version_string = version_match.group(1)

setup(
    name="zefboot",
    version=version_string,
    description="zefboot - config generation and discovery for validator cluster bootstrap",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="zefboot contributors",
    author_email="",
    license="MIT",
    packages=find_packages(include=["zefboot", "zefboot.*", "neurons"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={"test": test_requirements},
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "zefboot-coordinator=neurons.coordinator:main",
            "zefboot-validator=neurons.validator:main",
            "zefboot-client=neurons.client:main",
        ],
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development",
        "Topic :: System :: Distributed Computing",
    ],
)
