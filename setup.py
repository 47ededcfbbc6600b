from setuptools import setup, find_packages

setup(
    name="notecanvas",
    version="0.1.0",
    description="Dictation and markdown to laid-out canvas notes, with LLM categorization",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich>=12.5.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "aiohttp>=3.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "notecanvas=notecanvas.main:main",
        ],
    },
)
