"""Setup configuration for the cafe sales / data jobs cleaning pipelines."""
from setuptools import setup, find_packages

setup(
    name="datacleaning-etl",
    version="1.0.0",
    description="Cafe Sales & Data Jobs cleaning - repair, impute, classify, dedupe",
    author="Your Name",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "psycopg[binary]>=3.2.0",
    ],
    extras_require={
        "dev": [
            "pylint>=4.0.0",
            "pytest>=8.0.0",
            "pytest-cov>=5.0.0",
        ],
        "docs": [
            "sphinx>=7.0.0",
        ]
    },
    python_requires=">=3.11",
)
