from setuptools import setup, find_packages

setup(
    name="card-reader",
    version="0.1.0",
    description="Extract SillyTavern character cards from PNG images as JSON and readable text",
    author="Card Reader Team",
    packages=find_packages(include=["card_reader", "card_reader.*"]),
    install_requires=[
        "pydantic>=2.5.0",
        "pyyaml>=6.0.1",
        "discord.py>=2.3.2",
        "aiohttp>=3.9.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "Pillow>=10.0.0",
        ],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "card-reader=card_reader.cli:main",
            "card-reader-bot=card_reader.bot.main:main",
        ],
    },
)
