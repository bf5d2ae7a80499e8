from setuptools import setup, find_packages

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("requirements.txt", "r") as fh:
    reqs = fh.read()

setup(
    name="med-augtools",
    version="0.1.0",
    description="Reference-domain resampling and data augmentation for medical images.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    install_requires=reqs,
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    extras_require={
        'test': ['pytest', 'pytest-cov'],
    },
    entry_points={'console_scripts': ['augtools = augtools.cli.__main__:cli',]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: Apache Software License",
        "Development Status :: 2 - Pre-Alpha"
    ],
    python_requires='>=3.10',
)
