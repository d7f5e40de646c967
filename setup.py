from setuptools import setup

from drivekit.const import VERSION_STR, DESCRIPTION

setup(
    name="drivekit",
    version=VERSION_STR,
    python_requires='>=3.10',
    description=DESCRIPTION,
    packages=["drivekit"],
    install_requires=[
        "dataclasses-json",
        "graphviz"
    ],
    extras_require={
        "dev": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dk = drivekit:main",
            "drivekit = drivekit:main",
        ],
    },
    license="MIT",
    platforms="any",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
