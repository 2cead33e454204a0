from setuptools import setup, find_packages

main_ns = {}
with open("src/compact_jsonc/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)


setup(
    name="compact-jsonc",
    version=main_ns["__version__"],
    description="A JSON and JSONC formatter that produces compact but human-readable "
    "output and keeps comments",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "lark>=1.1",
        "wcwidth",
    ],
    extras_require={
        "test": ["pytest", "pytest-console-scripts"],
    },
    entry_points={
        "console_scripts": [
            "compact-jsonc=compact_jsonc._compact_jsonc:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
