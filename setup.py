from setuptools import setup
from setuptools import find_packages
import platform

if platform.system() != "Darwin":
    # Installs everywhere so the decoding logic can be used and tested,
    # but probing a device needs the Core Audio HAL
    print(f"WARNING: Platform '{platform.system()}' has no Core Audio backend")
    print("prism-probe can only inspect devices on macOS")

setup(
    name="prism-probe",
    version="0.1.0",
    description="Diagnostic client for Prism virtual audio device properties",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "psutil",
        'pyobjc-core; sys_platform == "darwin"',
        'pyobjc-framework-CoreAudio; sys_platform == "darwin"',
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "prism-probe=prismprobe.__main__:main",
        ],
    },
)
