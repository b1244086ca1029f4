from setuptools import setup

setup(
    name="src_catalog",
    version="0.1.0",
    description="Snapshot a TypeScript source tree into a single Markdown document",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=["src_catalog"],
    package_data={
        "src_catalog": ["templates/*.html"],  # Include templates for demo
    },
    install_requires=[],
    extras_require={
        "demo": ["flask", "markdown"],  # Optional dependencies for demo
        "test": ["pytest", "flask", "markdown"],
    },
    entry_points={
        "console_scripts": ["src-catalog=src_catalog.cli:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)
