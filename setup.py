#!/usr/bin/env python

from setuptools import setup

setup(
    name="sentry-wizard",
    version="0.1.0",
    packages=[
        "sentry_wizard",
        "sentry_wizard.apple",
        "sentry_wizard.apple.xcode",
        "sentry_wizard.details",
        "sentry_wizard.details.tools",
        "sentry_wizard.react_native",
    ],
    python_requires=">=3.9",
    install_requires=["openstep_parser"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["sentry-wizard = sentry_wizard.__main__:main"]},
)
