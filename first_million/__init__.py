"""First Million: projections and goal solvers for reaching a savings target."""

__version__ = "0.1.0"
