"""
Setup configuration for the Fretboard Resolver package.

This allows you to install the project with:
    pip install -e .

After installation, you can import modules like:
    from fretboard import resolve_chord_voicings, resolve_scale_fingering
    from fretboard.data.schema import Voicing
"""

from setuptools import setup, find_packages

# Read the README for long description
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    # -------------------------
    # Basic Package Information
    # -------------------------
    name="fretboard-resolver",
    version="0.1.0",
    author="Rohan Rajendra Dhanawade",
    author_email="rohan.dhanawade@example.com",
    description="Chord voicing and scale fingering resolution for guitar in standard tuning",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # -------------------------
    # Package Discovery
    # -------------------------
    packages=find_packages(where=".", include=["fretboard", "fretboard.*"]),
    package_dir={"": "."},

    # The YAML tables are read at runtime
    package_data={"fretboard.data": ["*.yaml"]},
    include_package_data=True,

    # -------------------------
    # Python Version Requirement
    # -------------------------
    python_requires=">=3.9",

    # -------------------------
    # Dependencies
    # -------------------------
    # Core dependencies (installed automatically)
    install_requires=[
        "numpy>=1.24.0",
        "pydantic>=2.0.0",
        "tqdm>=4.65.0",
        "pyyaml>=6.0",
    ],

    # Optional dependencies (install with pip install -e ".[dev]")
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "flake8>=6.1.0",
            "black>=23.7.0",
            "mypy>=1.5.0",
        ],
    },

    # -------------------------
    # Entry Points (CLI commands)
    # -------------------------
    entry_points={
        "console_scripts": [
            # fretboard chord Cmaj7 / fretboard scale "D dorian" / fretboard validate
            "fretboard=fretboard.app.cli:main",
        ],
    },

    # -------------------------
    # Metadata
    # -------------------------
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Sound/Audio",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    keywords="guitar, chords, voicings, scales, fretboard, music theory",
)
