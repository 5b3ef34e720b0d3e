"""
Agentic Collective-Dynamics Engine
Networked multi-agent simulation with chaos, stability and equilibrium analysis.
"""

from setuptools import setup, find_packages

setup(
    name="agentic-dynamics",
    version="0.1.0",
    description="Networked multi-agent dynamics simulator with consensus, chaos, "
                "emergent-behaviour, stability and game-theoretic diagnostics.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
)
