#!/usr/bin/env python
from setuptools import (
    find_packages,
    setup,
)

description = (
    "libp2p-core: signed peer records, envelopes and protocol version matching"
)

extras_require = {
    "dev": [
        "build>=0.9.0",
        "mypy==1.10.0",
        "pre-commit>=3.4.0",
        "tox>=4.0.0",
        "wheel",
    ],
    "test": [
        "pytest>=7.0.0",
        "pytest-xdist>=2.4.0",
    ],
}

extras_require["dev"] = extras_require["dev"] + extras_require["test"]

try:
    with open("./README.md", encoding="utf-8") as readme:
        long_description = readme.read()
except FileNotFoundError:
    long_description = description

install_requires = [
    "base58>=1.0.3",
    "coincurve>=10.0.0",
    "multiaddr>=0.2.0",
    "protobuf>=5.26.0",
    "pycryptodome>=3.9.2",
    "py-multihash>=3.0.0",
    "pynacl>=1.3.0",
]

setup(
    name="libp2p-core",
    version="0.1.0",
    description=description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    install_requires=install_requires,
    python_requires=">=3.10, <4",
    extras_require=extras_require,
    license="MIT AND Apache-2.0",
    zip_safe=False,
    keywords="libp2p p2p peer-record envelope",
    packages=find_packages(exclude=["scripts", "scripts.*", "tests", "tests.*"]),
    package_data={
        "libp2p_core": ["py.typed"],
        "libp2p_core.crypto.pb": ["*.proto", "*.pyi"],
        "libp2p_core.peer.pb": ["*.proto", "*.pyi"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    platforms=["unix", "linux", "osx", "win32"],
)
