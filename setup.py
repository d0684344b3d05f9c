from setuptools import setup, find_packages

setup(
    name="ecr-image-checker",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "click>=8.0",
        "python-dotenv>=1.0",
        "boto3>=1.28",
        "botocore>=1.31",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "moto[ecr,sts]>=5.0",
        ],
        "dev": [
            "black>=23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ecr-image-checker=eic.CLI.main:main",
        ],
    },
)
