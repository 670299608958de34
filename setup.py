from setuptools import setup, find_packages

setup(
    name="container-feeder",
    version="0.1.0",
    description="Import container images delivered as RPMs into the local Docker or CRI-O image store",
    author="",
    license="Apache-2.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "pyyaml>=6.0.1",
        "click>=8.1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "container-feeder=container_feeder.cli:main",
        ],
    },
    include_package_data=True,
)
