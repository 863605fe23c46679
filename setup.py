from setuptools import setup, find_packages

setup(
    name="fs_crawler",
    version="0.1.0",
    description="Concurrent filesystem crawler emitting POSIX file metadata as JSON lines",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyyaml>=6.0.0",
        "python-dateutil>=2.8.2",
        "pytz>=2023.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fs-crawler=fs_crawler.main:run",
        ],
    },
)
