"""
axumgen - Rust Backend Generator
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="axumgen",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Generate axum + Diesel/MongoDB Rust backends from an entity model",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Diegoproggramer/axumgen",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "axumgen": ["templates/**/*.j2", "templates/*.j2"],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "axumgen=axumgen.cli:cli_main",
        ],
    },
    keywords="rust, axum, diesel, mongodb, generator, code-generator, crud",
    project_urls={
        "Bug Reports": "https://github.com/Diegoproggramer/axumgen/issues",
        "Source": "https://github.com/Diegoproggramer/axumgen",
    },
)
