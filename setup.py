from setuptools import setup

setup(
    name="tempus",
    version="0.1.0",
    description="Composable dates, times, amounts and intervals",
    license="MIT",
    python_requires=">=3.9",
    package_dir={"": "pysrc"},
    packages=["tempus"],
    install_requires=[
        # zoneinfo needs timezone data, which Windows doesn't ship
        "tzdata>=2020.1; sys_platform == 'win32'",
        # used to find the system timezone outside of Linux and MacOS
        "tzlocal>=4.0; sys_platform != 'darwin' and sys_platform != 'linux'",
    ],
    extras_require={
        "strategies": ["hypothesis>=6.0"],
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
            "time-machine>=2.0,<3; implementation_name == 'cpython'",
        ],
    },
)
