from setuptools import setup, find_packages

setup(
    name="llmflow",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2",
        "mirascope<2",
        "tenacity",
        "aiohttp",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "llmflow-server=llmflow.server.app:main",
        ],
    },
    python_requires=">=3.9",
    description="graph workflows of LLM calls over several model providers",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
