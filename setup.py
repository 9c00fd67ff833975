from setuptools import find_packages, setup

# Define core requirements
core_requirements = [
    "jinja2>=3.1.0",
    "pydantic>=2.0.0",
    "requests>=2.28.2",
    "tqdm>=4.65.0",
    "typer>=0.9.0",
]

# Define development requirements
dev_requirements = [
    "pytest>=7.3.1",
]

setup(
    name="hwaet",
    version="0.1.0",
    packages=find_packages(include=["hwaet", "hwaet.*"]),
    package_data={"hwaet.rendering": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=core_requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    entry_points={
        "console_scripts": [
            "hwaet=hwaet.cli.main:run",
        ],
    },
    python_requires=">=3.9",
    description="Interactive glossing of Old English texts with oracle-backed token annotation",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
