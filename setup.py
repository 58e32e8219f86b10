from setuptools import setup, find_packages

setup(
    name="field-ops",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*", "scripts"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "python-dotenv>=1.0",
        "fastapi>=0.100",
        "uvicorn>=0.20",
        "typing_extensions>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    python_requires=">=3.8",
)
