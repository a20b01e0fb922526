"""Setup configuration for Relaycord Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="relaycord",
    version="0.1.0",
    description="A Discord bot for community moderation with an AI chat relay",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "aiosqlite>=0.20",
        "openai>=1.40",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "relaycord=relaycord.main:main",
        ],
    },
)
