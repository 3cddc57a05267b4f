"""
Setup script for secplus-study.

secplus-study is the offline data pipeline behind a CompTIA Security+
(SY0-701) study app. It turns raw study notes into:

1. Concept Dictionary - Atomic term -> definition pairs
2. Flashcard Set - Domain-stratified sample weighted by the exam blueprint
3. Practice Questions - MCQs with curated or corpus-drawn distractors

The 'secplus' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="secplus-study",
    version="1.0.0",
    description="Security+ SY0-701 study data pipeline: concepts, flashcards and practice questions",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["secplus", "secplus.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "secplus=secplus.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="security-plus sy0-701 flashcards study cli education",
)
