from setuptools import setup, find_packages

setup(
    name="translation-tracker",
    version="0.1.0",
    description="Translation progress tracking and MT abuse detection for article translation",
    author="Article Translation Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "translation_tracker": ["prompts/*.yaml"],
    },
    install_requires=[
        "openai>=1.12.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "jinja2>=3.1.2",
        "pydantic>=2.0.0",
        "beautifulsoup4>=4.12.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "track-translation=translation_tracker.cli:main",
        ],
    },
)
