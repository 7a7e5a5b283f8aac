"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def jsonapi_fmt_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    about = {}
    with open("jsonapi_fmt/__about__.py", "rt") as fp:
        exec(fp.read(), about)

    setup(
        name="jsonapi-fmt",
        packages=find_packages(exclude=["tests", "tests.*"]),
        version=about["__version__"],
        license="MIT",
        description=about["__description__"],
        long_description=open("README.rst").read(),
        long_description_content_type="text/x-rst",
        keywords=["Flask", "JsonAPI", "JSON:API", "REST", "SqlAlchemy", "middleware"],
        python_requires=">=3.9, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "License :: OSI Approved :: MIT License",
            "Intended Audience :: Developers",
            "Framework :: Flask",
            "Topic :: Software Development :: Libraries",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
        ],
        extras_require={"test": ["pytest>=7.0"]},
    )


jsonapi_fmt_setup()  # pragma: no cover
