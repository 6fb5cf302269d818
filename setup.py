from setuptools import setup, find_packages

setup(
    name="platform_rpc",
    version="0.1.0",
    description="Platform RPC - blocking JSON-RPC over HTTP with shared transport",
    author="Platform Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests>=2.28.0",
        "protobuf>=3.19.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
