from setuptools import setup, find_packages

optional_dependencies = {
    "testing": ["testflo>=1.4.7", "pytest"],
    "docs": ["sphinx"],
}

# Add an optional dependency that concatenates all others
optional_dependencies["all"] = sorted(
    [
        dependency
        for dependencies in optional_dependencies.values()
        for dependency in dependencies
    ]
)

setup(
    name="discadj",
    version="0.1.0",
    description="Discrete adjoint node state and block Gauss-Seidel coupled adjoint drivers",
    author="Graeme J. Kennedy",
    author_email="graeme.kennedy@ae.gatech.edu",
    python_requires=">=3.9.0",
    extras_require=optional_dependencies,
    install_requires=["numpy", "mpi4py>=3.1.5"],
    packages=find_packages(include=["discadj*"]),
)
