from setuptools import setup, find_packages

setup(
    name="connect_four",
    version="0.1.4",
    description="A fast Connect Four rules engine",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
