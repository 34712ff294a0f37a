from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="sc-toolkit",
    version="1.0.0",
    author="thesecondfox",
    author_email="thesecondfox@users.noreply.github.com",
    description="Single-cell RNA-seq helpers: Cell Ranger job submission, sample loading, ortholog mapping, plotting and marker export",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'sc_toolkit': ['config/*.yaml'],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        'dev': ['pytest>=6.0', 'h5py>=3.1', 'black>=21.0', 'flake8>=3.9'],
    },
    entry_points={
        "console_scripts": [
            "sc-toolkit=sc_toolkit.main:main",
        ],
    },
    keywords="single-cell RNA-seq bioinformatics scanpy cellranger orthologs",
)
