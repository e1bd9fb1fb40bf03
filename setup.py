#!/usr/bin/env python3
# -*- Mode:Python; indent-tabs-mode:nil; tab-width:4 -*-
#
# Copyright 2026 Canonical Ltd.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License version 3 as
# published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from setuptools import find_packages, setup

# Common distribution data
name = "snapinterfaces"
description = "Generate the security policy of snap interface connections."
author_email = "snapcraft@lists.snapcraft.io"
url = "https://github.com/snapcore/snapcraft"
license_ = "GPL v3"
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
    "Natural Language :: English",
    "Programming Language :: Python",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Topic :: Security",
    "Topic :: System :: Software Distribution",
]

test_requires = [
    "pytest",
    "pytest-cov",
    "pytest-mock",
]

dev_requires = [
    "black",
    "codespell[toml]",
    "coverage[toml]",
    "isort",
    "mypy",
    "pylint",
    *test_requires,
    "ruff",
    "types-PyYAML",
    "types-tabulate",
]

install_requires = [
    "craft-application",
    "craft-cli",
    "overrides",
    "pydantic>=2",
    "pyyaml",
    "tabulate",
]

extras_requires = {
    "dev": dev_requires,
    "test": test_requires,
}

setup(
    name=name,
    version="0.1.0",
    description=description,
    author_email=author_email,
    url=url,
    packages=find_packages(include=["snapinterfaces", "snapinterfaces.*"]),
    license=license_,
    classifiers=classifiers,
    entry_points=dict(
        console_scripts=[
            "snapinterfaces = snapinterfaces.cli:run",
        ]
    ),
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require=extras_requires,
    test_suite="tests.unit",
)
