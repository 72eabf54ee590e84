from setuptools import setup, find_packages

setup(
    name="vox",
    version="0.1.0",
    description="Record your voice, transcribe it, and copy the text to the clipboard",
    author="",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich>=12.5.0",
        "click>=8.1.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "aiohttp>=3.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vox=vox.main:main",
        ],
    },
)
