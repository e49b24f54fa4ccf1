# setup.py - Build the factorize package
from setuptools import setup, find_packages

setup(
    name="factorize",
    version="0.1.0",
    description="Convert categorical variables into integer-coded factors",
    packages=find_packages(include=["factorize", "factorize.*"]),
    python_requires=">=3.8",
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
)
