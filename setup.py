"""Setup configuration for sexlinked package"""

from setuptools import setup, find_packages

setup(
    name="sexlinked",
    version="0.1.0",
    author="sexlinked Development Team",
    description="Identify sex-linked and autosomal loci in SNP datasets from call rate and heterozygosity by sex",
    long_description=open("README.md").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sexlinked", "sexlinked.*"]),
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.10.0",
        "pandas>=1.2.0",
        "matplotlib>=3.3.0",
        "seaborn>=0.11.0",
        "joblib>=1.0.0",
        "tqdm>=4.60.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "statsmodels>=0.12.0",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
