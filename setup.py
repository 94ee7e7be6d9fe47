# This should be only one line. If it must be multi-line, indent the second
# line onwards to keep the PKG-INFO file format intact.
"""Manage (encrypted) rclone remote configuration files."""

from setuptools import find_packages, setup

version = open("src/rcloneconf/version.txt").read().strip()

setup(
    name="rcloneconf",
    version=version,
    install_requires=[
        "ConfigUpdater>=3",
        "PyNaCl",
        "cryptography",
        "importlib_metadata",
        "py",
        "pyyaml", ],
    extras_require={
        "test": [
            "mock",
            "pytest",
            "pytest-coverage",
            "pytest-instafail",
            "pytest-timeout", ]},
    entry_points="""
        [console_scripts]
            rcloneconf = rcloneconf.main:main
        [rcloneconf.backends]
            alias = rcloneconf.builtin:alias
            local = rcloneconf.builtin:local
            sftp = rcloneconf.builtin:sftp
    """,
    license="BSD (2-clause)",
    keywords="rclone configuration encryption",
    classifiers="""\
License :: OSI Approved :: BSD License
Programming Language :: Python
Programming Language :: Python :: 3
Programming Language :: Python :: 3.7
Programming Language :: Python :: 3.8
Programming Language :: Python :: 3.9
Programming Language :: Python :: 3 :: Only
"""[:-1].split("\n"),
    description=__doc__.strip(),
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    package_data={"rcloneconf": ["version.txt"]},
    zip_safe=False,
    test_suite="rcloneconf.tests",
    python_requires=">=3.7")
