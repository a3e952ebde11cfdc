import setuptools

readme = ""
with open("README.md", encoding="utf-8") as handle:
    readme = handle.read()

setuptools.setup(
    name="tgd",
    version="0.1.0",
    description="Owned operating system file handles for the Tiled Geographic Data header library.",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(
        include=["tgd", "tgd.*"],
    ),
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "tgd = tgd.cli:main"
        ]
    },
    install_requires=[
        "cerberus>=1.3",
        "click>=8.0",
        "mergedeep>=1.3",
        "rich>=10.3",
        "ruamel.yaml>=0.17",
        "structlog>=21.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
