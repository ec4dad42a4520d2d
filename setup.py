"""
Setup script for LSHKDE package.
"""

from setuptools import setup, find_packages
import os

# Read README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

setup(
    name="lshkde",
    version="0.1.0",
    author="LSHKDE Development Team",
    description="Approximate Gaussian kernel density estimation with layered LSH",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "jax": ["jax"],
        "dev": ["pytest", "black", "flake8"],
        "all": ["jax", "pytest", "black", "flake8"],
    },
    entry_points={
        "console_scripts": ["lshkde=lshkde.__main__:main"],
    },
    keywords="kernel density estimation, locality sensitive hashing, LSH, KDE",
    include_package_data=True,
)
