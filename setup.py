"""Setup configuration for brewfeed."""

from setuptools import find_packages, setup

setup(
    name="brewfeed",
    version="0.1.0",
    description="Cached brewery lookup with offline snapshot fallback",
    python_requires=">=3.12",
    packages=find_packages(where="src", include=["brewfeed*"]),
    package_dir={"": "src"},
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
        "pyarrow>=15.0.0",
    ],
    entry_points={
        "console_scripts": [
            "brewfeed=brewfeed.cli:cli_entry",
        ],
    },
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
            "pytest-mock>=3.12.0",
            "respx>=0.21.0",
            "python-dotenv>=1.0.0",
        ],
    },
)
