from setuptools import setup, find_packages

setup(
    name="fusion-neutron-source",
    version="0.1.0",
    license="AGPL-3.0-or-later",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["fusion_neutron_source", "fusion_neutron_source.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1",
        "numpy",
        "matplotlib",
        "scipy>=1.15",
        "pydantic>=2.0",
        "pandas>=1.5",
        "openpyxl",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
