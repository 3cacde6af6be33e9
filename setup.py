from setuptools import setup, find_packages

setup(
    name="lightwire",
    version="1.0.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "pyyaml>=6.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0"
        ]
    },
    python_requires=">=3.10",
)
