from setuptools import find_packages, setup

setup(
    name="lispreader",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    license="MIT License",
    description="A reader for a Clojure-like Lisp, producing Python data",
    install_requires=[
        "attrs>=22.2.0",
        "immutables>=0.20,<1.0.0",
        "pyrsistent>=0.18.0,<1.0.0",
        "typing-extensions>=4.7.0,<5.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0,<9.0.0"],
    },
    entry_points={
        "console_scripts": ["lispreader=lispreader.cli:invoke_cli"],
    },
)
