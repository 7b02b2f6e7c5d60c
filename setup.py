"""Setup configuration for resilient-request."""

from setuptools import setup, find_packages

setup(
    name="resilient-request",
    version="0.1.0",
    description="HTTP request client with failure classification and exponential backoff retries",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "resilient-request=resilient_request.cli:main",
        ],
    },
)
