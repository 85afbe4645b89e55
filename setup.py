import setuptools
import os
import re

with open("README.md", "r") as fh:
    long_description = fh.read()

# read version from src/holoprop/_version.py
version_file = os.path.join("src/holoprop", "_version.py")
with open(version_file) as f:
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
if not version_match:
    raise RuntimeError("Unable to find version string.")
version = version_match.group(1)

setuptools.setup(
    name="holoprop-py",
    version=version,
    python_requires='>3.8',
    description="Fresnel propagation for digitally refocusing holograms",
    long_description=long_description,
    long_description_content_type="text/markdown",
    install_requires=[
        "numpy>=1.0",
        "torch>=2.0.0"], # complex tensors and torch.fft throughout
    extras_require={
        'tests': [
            "pytest",
            "scipy>=1.0",
        ],
    },
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
