import os.path
from setuptools import find_packages, setup

# the directory containing this file
ROOT = os.path.dirname(__file__)

# the text of the README file
with open(os.path.join(ROOT, "README.md"), "r", encoding="utf-8") as f:
    README = f.read()

setup(
    name="markdown-to-adf",
    version="0.1.1",
    description="Publish Markdown documents to Confluence as Atlassian Document Format",
    long_description=README,
    long_description_content_type="text/markdown",
    url="https://github.com/hunyadi/md2conf",
    author="Levente Hunyadi",
    author_email="hunyadi@gmail.com",
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "cattrs",
        "lxml",
        "markdown",
        "orjson",
        "pymdown-extensions",
        "PyYAML",
        "requests",
        "typing_extensions; python_version < '3.12'",
    ],
    entry_points={
        "console_scripts": [
            "md2adf=md2adf.__main__:main",
        ],
    },
)
