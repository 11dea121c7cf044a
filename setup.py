import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="ethereum-signing",
    version="0.1.0",
    description="Ethereum transaction encoding, ECDSA signing and keystore files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    package_data={"ethereum_signing": ["logger.cfg", "py.typed"]},
    python_requires=">=3.10",
    install_requires=[
        "coincurve>=20",
        "pycryptodome>=3.20",
        "ethereum-types>=0.2",
        "pydantic>=2.8",
    ],
    extras_require={
        "test": [
            "pytest>=8",
        ],
    },
)
