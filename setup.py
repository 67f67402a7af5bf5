#!/usr/bin/env python3
"""Setup script for AI News Hub."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="ai-news-hub",
    version="0.1.0",
    author="AI News Hub Team",
    author_email="team@example.com",
    description="Aggregates and ranks AI news feeds and social posts for a topic",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/ai-news-hub/ai-news-hub",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
        "Topic :: Text Processing :: Linguistic",
    ],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "httpx>=0.27",
        "aiohttp>=3.9",
        "feedparser>=6.0",
        "selectolax>=0.3,<1.0",
        "structlog>=24.1",
        "orjson>=3.10",
        "click>=8.1",
        "jinja2>=3.1",
        "pyyaml>=6.0",
        "rich>=13.7.1",
    ],
    extras_require={
        "dev": [
            "pytest>=8.2",
            "pytest-asyncio>=0.23",
            "ruff>=0.4",
            "mypy>=1.10",
            "coverage>=7.5",
            "pytest-cov>=4.1",
        ]
    },
    entry_points={
        "console_scripts": [
            "ai-news-hub=ai_news_hub.orchestrator:cli",
            "check-feeds=ai_news_hub.check_feeds:main",
        ],
    },
    include_package_data=True,
    package_data={
        "ai_news_hub": ["*.yaml", "templates/*.j2"],
    },
)
