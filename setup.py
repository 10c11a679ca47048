"""
Setup script for PDF Hotspots.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdf-hotspots",
    version="1.0.0",
    description="Embed interactive hotspot regions inside PDF files and hit-test them in viewers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PDF Hotspots Contributors",
    author_email="",
    packages=find_packages(include=["pdf_hotspots", "pdf_hotspots.*"]),
    install_requires=[
        "pypdf>=4.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "pymupdf>=1.23.0",
        "Pillow>=10.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-hotspots=pdf_hotspots.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Multimedia :: Graphics :: Viewers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf hotspots annotations interactive viewer manifest hit-test",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
