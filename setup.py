"""
Setup script for the vault_search package.
"""

from setuptools import setup, find_packages

setup(
    name="vault_search",
    version="0.1.0",
    description="Hybrid BM25 and embedding search for markdown knowledge vaults",
    author="Shubham Singh",
    author_email="shubh2014shiv@gmail.com",
    packages=find_packages(include=["vault_search", "vault_search.*"]),
    install_requires=[
        "numpy>=1.20.0",
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0",
        "pydantic-yaml>=1.1.0",
        "pyyaml>=6.0",
        "tqdm>=4.64.0",
        "tenacity>=8.0.0",  # For retry logic
        "google-generativeai>=0.5.0",
        "google-api-core>=2.11.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "flake8>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vault-search=vault_search.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
)
