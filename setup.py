# setup.py
from setuptools import setup, find_packages

setup(
    name="malt",
    version="0.1.0",
    description="A small Lisp interpreter with a trampolined evaluator, lazy sequences and fibers",
    packages=find_packages(include=["malt", "malt.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
