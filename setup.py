"""Setup script for reportcard."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

with open("requirements.txt", "r", encoding="utf-8") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="python-reportcard",
    version="1.0.0",
    author="reportcard contributors",
    description="Grade the quality of a Python source tree from a set of concurrent checks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Quality Assurance",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "tools": ["black", "pyflakes", "pylint"],
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "reportcard=reportcard.cli.main:main",
        ],
    },
)
