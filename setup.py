# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="kpasscli",
    version="0.3.0",
    description="Look up a single credential field from KeePass, macOS Keychain or Bitwarden",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["kpasscli", "kpasscli.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pykeepass>=4.0",
        "PyYAML>=6.0",
        "pyotp>=2.8",
        "construct>=2.10",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'kpasscli=kpasscli.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
