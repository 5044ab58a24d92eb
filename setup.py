# setup.py
import os
import re

import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

PKG = "qsep"
VERSIONFILE = os.path.join(PKG, "_version.py")
verstrline = open(VERSIONFILE, "rt").read()
VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
mo = re.search(VSRE, verstrline, re.M)
if mo:
    VERSION = mo.group(1)
else:
    raise RuntimeError("Unable to find version string in %s." % (VERSIONFILE,))

setuptools.setup(
    name="qsep",
    version=VERSION,
    author="The QSEP developers",
    description="Entanglement quantifiers and DPS relaxations via conic optimization",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=setuptools.find_packages(include=["qsep", "qsep.*"]),
    python_requires=">=3.8",
    install_requires=["numpy", "scipy", "qics"],
    extras_require={"test": ["pytest"]},
    package_data={"": ["README.md", "LICENSE.md"]},
)
