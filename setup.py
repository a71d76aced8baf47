# SPDX-FileCopyrightText: 2025 posture-probe contributors
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="posture-probe",
    version="0.1.0",
    description="Device integrity and security posture checks for sensitive authentication flows",
    license="MIT",
    packages=find_packages(include=["posture", "posture.*", "bridge", "bridge.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click<9.0,>=8.1",
    ],
    extras_require={
        # on-device bindings; python-for-android ships its own recipes for these
        "android": [
            "kivy>=2.2",
            "pyjnius>=1.5",
        ],
        "test": [
            "pytest>=8.0.0",
            "pytest-timeout>=2.3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "posture-probe=bridge.cli:main",
        ],
    },
)
