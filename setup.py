from setuptools import setup, find_packages

setup(
    name="ps2-psp-converter",
    version="0.1.0",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    include_package_data=True,
    package_data={"ps2_psp_converter": ["config/*.yaml"]},
    python_requires=">=3.12",
    install_requires=[
        "openai>=1.10",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-mock",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "ps2-to-psp=ps2_psp_converter.main:main",
        ],
    },
    description="Generate a PSP project skeleton from an extracted PS2 game folder using the Perplexity API",
    author="PS2 PSP Converter Developers",
)
