# setup.py
from setuptools import setup, find_packages

setup(
    name="table-schema",              # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),  # table_schema/ and its schemas
    install_requires=[],              # std-lib only at runtime
    include_package_data=True,        # so we can bundle the JSON schemas
    package_data={
        "table_schema": ["schemas/*.json"],
    },
    python_requires=">=3.9",
    description="Declarative validation and normalization of nested configuration data",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
