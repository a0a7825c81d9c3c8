#!/usr/bin/env python3
"""
MyInfo Client SDK for Python
"""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="myinfo-client",
    version="0.1.0",
    author="MyInfo Client Contributors",
    description="Python relying-party client for the MyInfo and MyInfo Business APIs: PKI_SIGN request signing, token exchange, JWE decryption and JWS verification.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/myinfo-client/myinfo-client-python",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=[
        "python-jose[cryptography]>=3.3.0",
        "cryptography>=3.4",
        "aiohttp>=3.8.0",
        "yarl>=1.6",
        "structlog>=21.1.0",
    ],
    keywords=[
        "myinfo",
        "myinfo-business",
        "singpass",
        "pki-sign",
        "oauth2",
        "jwt",
        "jwe",
        "encryption",
    ],
    project_urls={
        "Bug Reports": "https://github.com/myinfo-client/myinfo-client-python/issues",
        "Source": "https://github.com/myinfo-client/myinfo-client-python",
    },
)
