"""
Exception hierarchy for pydecomp.

All exceptions inherit from PyDecompError to allow catching any
library-specific error. Kernel-specific failures should raise the most
specific class defined here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyDecompError(Exception):
    """Base exception for all pydecomp errors."""
    pass


class ValidationError(PyDecompError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks, before any
    numerical work starts.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a kernel requires a square matrix and gets a rectangular one,
    or when the right-hand side does not match the coefficient matrix.
    """
    pass


class NumericalError(PyDecompError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a pivot or diagonal entry falls below the zero threshold
    during LU factorization, inversion, or triangular substitution.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised by Cholesky when a diagonal radicand is not strictly positive.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
        column: Column at which the factorization broke down, if known
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None,
        column: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue
        self.column = column


class ConvergenceError(PyDecompError):
    """
    Iterative algorithm failed to converge.

    Raised by the QR eigen iteration in strict mode when the off-diagonal
    mass is still above tolerance after the maximum number of iterations.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final off-diagonal residual
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
