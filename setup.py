# setup.py
from setuptools import setup, find_packages

setup(
    name="jexl",
    version="0.1.0",
    packages=find_packages(include=["jexl", "jexl.*"]),
    python_requires=">=3.10",
    install_requires=[
        "jsonschema>=4.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False,
)
