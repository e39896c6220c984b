from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="signup-suite",
    version="1.0.0",
    description="Browser session harness and signup/login test suite built on Playwright and pytest",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["signup_suite", "signup_suite.*"]),
    package_data={"signup_suite": ["data/*.json"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: Pytest",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.24"],
    },
)
