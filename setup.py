from setuptools import setup, find_packages

setup(
    name="sitedeploy",
    version="0.1.0",
    packages=find_packages(exclude=["src.tests", "src.tests.*"]),
    py_modules=["cli"],
    install_requires=[
        "boto3",
        "botocore",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
            "moto[s3]>=5.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'sitedeploy=cli:main',
        ],
    },
    author="ecaa",
    description="CloudFormation custom resource that publishes a static site build to S3",
    python_requires='>=3.9',
)
