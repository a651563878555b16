"""
Torch backend for the matrix kernels.

Runs the products, LU inversion and decompositions through torch /
torch.linalg on a configured device (CPU, CUDA, or Apple MPS). Operands
are copied to the device, the kernel runs there, and results are copied
back through the caller's view, so buffer semantics match the CPU
backends exactly.

torch has no condition estimator, so the rcond check uses the shared
Hager/Higham estimator driven by torch.linalg.lu_solve.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pystatgen.core.exceptions import BackendSolveError, BackendUnavailableError
from pystatgen.core.compute.device import select_device
from pystatgen.matrix.backends.base import (
    gesvd_min_lwork,
    raise_if_ill_conditioned,
    raise_zero_pivot,
    syevr_min_lworks,
)
from pystatgen.matrix.backends._condest import (
    estimate_inverse_norm1,
    reciprocal_condition,
)


class TorchBackend:
    """
    torch backend.

    Pivots are stored as int64 in torch's 1-based LU convention.

    Args:
        device: 'cpu', 'cuda', 'cuda:N', 'mps', or 'auto'

    Raises:
        BackendUnavailableError: If torch is not installed, or the device
            cannot run float64 kernels (MPS)
    """

    def __init__(self, device: str = 'cpu'):
        try:
            import torch
        except ImportError as e:
            raise BackendUnavailableError(
                "The torch matrix backend requires PyTorch. "
                "Install with: pip install torch",
                backend='torch',
            ) from e

        info = select_device(device)
        if not info.supports_fp64:
            raise BackendUnavailableError(
                f"{info} does not support float64. The matrix kernels need "
                f"double precision; use device='cpu' or a CUDA device.",
                backend='torch',
            )
        self._torch = torch
        self.device_info = info
        self.device = torch.device(info.torch_device)

    @property
    def name(self) -> str:
        return f'torch_{self.device.type}'

    @property
    def index_dtype(self) -> np.dtype:
        return np.dtype(np.int64)

    @property
    def pivot_elem_alloc(self) -> int:
        return 8

    @property
    def pivot_checked_elem_alloc(self) -> int:
        return 8

    def _to_device(self, x: NDArray[Any]):
        return self._torch.from_numpy(np.ascontiguousarray(x)).to(self.device)

    @staticmethod
    def _to_numpy(t) -> NDArray[Any]:
        return t.cpu().numpy()

    # === Products ===

    def dot(self, vec1: NDArray[Any], vec2: NDArray[Any]) -> float:
        return float(self._torch.dot(self._to_device(vec1), self._to_device(vec2)).item())

    def gemm(self, a: NDArray[Any], b: NDArray[Any], beta: float, c: NDArray[Any]) -> None:
        out = self._to_device(a) @ self._to_device(b)
        if beta != 0.0:
            out = out + beta * self._to_device(c)
        c[...] = self._to_numpy(out)

    def syrk_lower(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        a_t = self._to_device(a)
        full = self._to_numpy(a_t @ a_t.T)
        rows, cols = np.tril_indices(a.shape[0])
        c[rows, cols] = full[rows, cols]

    def gram_incr(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        a_t = self._to_device(a)
        c += self._to_numpy(a_t.T @ a_t)

    # === Inversion ===

    def lu_decompose(self, a: NDArray[Any], piv: NDArray[Any], check_rcond: bool) -> None:
        torch = self._torch
        dim = a.shape[0]
        a_t = self._to_device(a)
        anorm = float(torch.linalg.matrix_norm(a_t, ord=1).item()) if check_rcond else 0.0

        lu, pivots, info = torch.linalg.lu_factor_ex(a_t)
        info = int(info.item())
        if info > 0:
            raise_zero_pivot(info, dim)
        if info < 0:
            raise BackendSolveError(
                f"lu_factor: argument {-info} had an illegal value",
                routine='lu_factor', info=info,
            )
        a[...] = self._to_numpy(lu)
        piv[:dim] = self._to_numpy(pivots)

        if check_rcond:
            def solve(x: NDArray[Any], transpose: bool) -> NDArray[Any]:
                rhs = self._to_device(x.reshape(dim, 1))
                return self._to_numpy(
                    torch.linalg.lu_solve(lu, pivots, rhs, adjoint=transpose)
                )[:, 0]

            ainv_norm = estimate_inverse_norm1(solve, dim, a.dtype)
            raise_if_ill_conditioned(reciprocal_condition(anorm, ainv_norm), dim)

    def lu_invert(self, a: NDArray[Any], piv: NDArray[Any], work: NDArray[Any]) -> None:
        torch = self._torch
        dim = a.shape[0]
        lu = self._to_device(a)
        pivots = self._to_device(piv[:dim].astype(np.int32))
        identity = torch.eye(dim, dtype=lu.dtype, device=self.device)
        a[...] = self._to_numpy(torch.linalg.lu_solve(lu, pivots, identity))

    # === Decompositions ===

    def svd_lwork(self, row_ct: int, col_ct: int) -> int:
        return gesvd_min_lwork(row_ct, col_ct)

    def svd(self, m):
        torch = self._torch
        try:
            u, s, vt = torch.linalg.svd(self._to_device(m), full_matrices=False)
        except torch.linalg.LinAlgError as e:
            raise BackendSolveError(
                f"SVD did not converge: {e}", routine='torch.linalg.svd'
            ) from e
        return self._to_numpy(u), self._to_numpy(s), self._to_numpy(vt)

    def eigh_lworks(self, dim: int) -> tuple[int, int]:
        return syevr_min_lworks(dim)

    def eigh_top(self, a, pc_ct):
        torch = self._torch
        try:
            w, v = torch.linalg.eigh(self._to_device(a), UPLO='L')
        except torch.linalg.LinAlgError as e:
            raise BackendSolveError(
                f"Symmetric eigensolver did not converge: {e}",
                routine='torch.linalg.eigh',
            ) from e
        dim = a.shape[0]
        return self._to_numpy(w[dim - pc_ct:]), self._to_numpy(v[:, dim - pc_ct:]), None
