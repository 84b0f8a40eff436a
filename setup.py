#!/usr/bin/env python3
"""
Setup script for PIZZABOT, an AIRMASH chat command bot
"""

from setuptools import setup, find_packages

setup(
    name="pizzabot",
    version="0.1.0",
    description="AIRMASH protocol v5 bot that answers public chat commands",
    packages=find_packages(include=["bot", "bot.*", "shared", "shared.*"]),
    install_requires=[
        "websockets>=15.0",
        "typer>=0.12.3",
        "rich>=13.9.2",
        "PyYAML>=6.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.4.2",
            "pytest-asyncio>=1.2.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'pizzabot=bot.bot_cli:main',
        ],
    },
)
