from setuptools import setup, find_packages

setup(
    name="ftlutils",
    version="0.1.0",
    description="Helpers for pihole-FTL config files, PID files and the FTL config CLI",
    packages=find_packages(include=["ftlutils", "ftlutils.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "pydantic>=2.0",
        "tomli>=2.0",
        "tomli-w>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ftlutils=ftlutils.cli:cli",
        ],
    },
)
