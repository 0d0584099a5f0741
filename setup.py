from setuptools import setup

with open("hnap/version.py") as f:
    exec(f.read())

setup(
    name="python-hnap",
    version=__version__,  # type: ignore # noqa: F821
    description="Python API for D-Link HNAP smart plugs",
    url="",
    author="",
    author_email="",
    license="GPLv3",
    packages=["hnap"],
    install_requires=[
        "aiohttp",
        "asyncclick",
        "defusedxml",
        "mashumaro",
        "orjson",
        "yarl",
    ],
    extras_require={
        "test": [
            "freezegun",
            "pytest",
            "pytest-asyncio",
            "pytest-mock",
        ],
    },
    python_requires=">=3.11",
    entry_points={"console_scripts": ["hnap=hnap.cli:cli"]},
    zip_safe=False,
)
