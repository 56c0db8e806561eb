"""
SABR stochastic volatility model.

Implements:
- Hagan et al. log-normal implied volatility approximation
- Shifted SABR for negative rates
- Analytic adjoint: volatility and its first derivatives with respect to
  forward, strike, alpha, beta, rho and nu
- Effective parameters for rates compounded in arrears

References:
- Hagan, P.S. et al. (2002). "Managing Smile Risk." Wilmott Magazine.
- Willems, S. (2020). "SABR smiles for RFR caplets."
"""

import logging
from dataclasses import dataclass
from typing import Dict, NamedTuple, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Strikes below CUTOFF_MONEYNESS * forward are floored to that level
CUTOFF_MONEYNESS = 1e-12
# Below this |z| the z/x(z) ratio uses its first-order expansion
SMALL_Z = 1e-6
# Volatility floor; derivatives are zero on the floor
MIN_VOL = 1e-6


@dataclass
class SabrParams:
    """
    SABR model parameters at a single expiry.

    Attributes:
        alpha: Initial volatility level
        beta: CEV exponent (0 = normal, 1 = lognormal)
        rho: Correlation between forward and vol (-1 < rho < 1)
        nu: Volatility of volatility
        shift: Shift applied to forward and strike (default 0)
    """
    alpha: float
    beta: float
    rho: float
    nu: float
    shift: float = 0.0

    def __post_init__(self):
        """Validate parameters."""
        if not -1 < self.rho < 1:
            raise ValueError(f"rho must be in (-1, 1), got {self.rho}")
        if self.nu < 0:
            raise ValueError(f"nu must be non-negative, got {self.nu}")
        if not 0 <= self.beta <= 1:
            raise ValueError(f"beta must be in [0, 1], got {self.beta}")
        if self.alpha <= 0:
            raise ValueError(f"alpha must be positive, got {self.alpha}")

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {
            "alpha": self.alpha,
            "beta": self.beta,
            "rho": self.rho,
            "nu": self.nu,
            "shift": self.shift
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "SabrParams":
        """Create from dictionary."""
        return cls(
            alpha=d["alpha"],
            beta=d["beta"],
            rho=d["rho"],
            nu=d["nu"],
            shift=d.get("shift", 0.0)
        )


class VolatilityAdjoint(NamedTuple):
    """Volatility and derivatives [dF, dK, dAlpha, dBeta, dRho, dNu]."""
    volatility: float
    derivatives: np.ndarray


def hagan_black_vol(
    F: float,
    K: float,
    T: float,
    alpha: float,
    beta: float,
    rho: float,
    nu: float,
    shift: float = 0.0
) -> float:
    """
    Hagan et al. approximation for SABR Black implied volatility.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry (years)
        alpha: SABR alpha
        beta: CEV exponent
        rho: Correlation
        nu: Vol of vol
        shift: Shift for negative rates

    Returns:
        Black implied volatility of the shifted forward and strike
    """
    return volatility_adjoint(F, K, T, alpha, beta, rho, nu, shift).volatility


def volatility_adjoint(
    F: float,
    K: float,
    T: float,
    alpha: float,
    beta: float,
    rho: float,
    nu: float,
    shift: float = 0.0
) -> VolatilityAdjoint:
    """
    Hagan volatility with its first derivatives by a backward sweep.

    With L = ln(F/K), b = 1 - beta and s = (F K)^(b/2):
        z     = nu / alpha * s * L
        r(z)  = z / x(z),  x(z) = ln((sqrt(1 - 2 rho z + z^2) + z - rho) / (1 - rho))
        g     = 1 + b^2 L^2 / 24 + b^4 L^4 / 1920
        A     = b^2 alpha^2 / (24 s^2) + rho beta nu alpha / (4 s) + (2 - 3 rho^2) nu^2 / 24
        vol   = alpha / (s g) * r(z) * (1 + A T)

    Args:
        F, K, T: Forward, strike and time to expiry
        alpha, beta, rho, nu: SABR parameters
        shift: Shift added to both forward and strike

    Returns:
        VolatilityAdjoint with derivatives ordered [F, K, alpha, beta, rho, nu]

    Raises:
        ValueError: If the shifted forward is not positive
    """
    f = F + shift
    k = K + shift
    if f <= 0:
        raise ValueError(f"Shifted forward ({f}) must be positive")

    strike_floored = False
    cutoff = f * CUTOFF_MONEYNESS
    if k < cutoff:
        logger.info("Shifted strike %s below cutoff %s, floored to cutoff", k, cutoff)
        k = cutoff
        strike_floored = True

    b = 1.0 - beta
    L = np.log(f / k)
    log_fk = np.log(f * k)
    s = np.exp(0.5 * b * log_fk)
    z = nu / alpha * s * L

    # r(z) and its partials
    if abs(z) < SMALL_Z:
        r = 1.0 - 0.5 * z * rho
        dr_dz = -0.5 * rho
        dr_drho = -0.5 * z
    else:
        sq = np.sqrt(1.0 - 2.0 * rho * z + z * z)
        arg = sq + z - rho
        x = np.log(arg / (1.0 - rho))
        r = z / x
        dx_dz = ((z - rho) / sq + 1.0) / arg
        dx_drho = (-z / sq - 1.0) / arg + 1.0 / (1.0 - rho)
        dr_dz = 1.0 / x - z / (x * x) * dx_dz
        dr_drho = -z / (x * x) * dx_drho

    g = 1.0 + b**2 * L**2 / 24.0 + b**4 * L**4 / 1920.0
    sf1 = s * g
    A = (b**2 * alpha**2 / (24.0 * s**2) + rho * beta * nu * alpha / (4.0 * s)
         + (2.0 - 3.0 * rho**2) * nu**2 / 24.0)
    sf2 = 1.0 + A * T

    vol = alpha / sf1 * r * sf2
    if vol < MIN_VOL:
        return VolatilityAdjoint(MIN_VOL, np.zeros(6))

    # Backward sweep
    bar_sf1 = -vol / sf1
    bar_sf2 = alpha * r / sf1
    bar_r = alpha * sf2 / sf1

    bar_alpha = r * sf2 / sf1 + bar_sf2 * T * (b**2 * alpha / (12.0 * s**2) + rho * beta * nu / (4.0 * s))
    bar_rho = bar_r * dr_drho + bar_sf2 * T * (beta * nu * alpha / (4.0 * s) - rho * nu**2 / 4.0)
    bar_nu = bar_sf2 * T * (rho * beta * alpha / (4.0 * s) + (2.0 - 3.0 * rho**2) * nu / 12.0)
    bar_beta = (bar_sf2 * T * (-b * alpha**2 / (12.0 * s**2) + rho * nu * alpha / (4.0 * s))
                - bar_sf1 * s * (b * L**2 / 12.0 + b**3 * L**4 / 480.0))
    bar_L = bar_sf1 * s * (b**2 * L / 12.0 + b**4 * L**3 / 480.0)
    bar_s = bar_sf1 * g + bar_sf2 * T * (-b**2 * alpha**2 / (12.0 * s**3) - rho * beta * nu * alpha / (4.0 * s**2))

    bar_z = bar_r * dr_dz
    bar_nu += bar_z * s * L / alpha
    bar_alpha -= bar_z * z / alpha
    bar_s += bar_z * nu * L / alpha
    bar_L += bar_z * nu * s / alpha

    bar_beta -= bar_s * 0.5 * s * log_fk
    bar_f = bar_s * 0.5 * b * s / f + bar_L / f
    bar_k = bar_s * 0.5 * b * s / k - bar_L / k

    if strike_floored:
        bar_f += bar_k * CUTOFF_MONEYNESS
        bar_k = 0.0

    derivatives = np.array([bar_f, bar_k, bar_alpha, bar_beta, bar_rho, bar_nu], dtype=float)
    return VolatilityAdjoint(float(vol), derivatives)


@dataclass(frozen=True)
class SabrInArrearsFunction:
    """
    Effective SABR parameters for a rate compounded over [t0, t1].

    An option on a rate set over an accrual period sees a volatility that
    decays through the period. Its price is approximated by Hagan at
    expiry t1 with effective parameters derived from the raw ones
    (Willems, "SABR smiles for RFR caplets"). Beta is unchanged. The
    formula switches at t0 = 0, once the accrual has started.

    Attributes:
        q: Volatility decay exponent through the accrual period (q > 0)
    """
    q: float = 1.0

    def __post_init__(self):
        if self.q <= 0:
            raise ValueError(f"q must be positive, got {self.q}")

    def effective_parameters(self, params: SabrParams, start_time: float, end_time: float) -> SabrParams:
        """
        Effective parameters for an accrual from start_time to end_time.

        Args:
            params: Raw SABR parameters
            start_time: Time to the accrual start, negative once started
            end_time: Time to the accrual end

        Returns:
            SabrParams with the raw beta and shift

        Raises:
            ValueError: If end_time is not after both zero and start_time
        """
        return self.effective_parameters_adjoint(params, start_time, end_time)[0]

    def effective_parameters_adjoint(
        self,
        params: SabrParams,
        start_time: float,
        end_time: float
    ) -> Tuple[SabrParams, np.ndarray]:
        """
        Effective parameters and their Jacobian to the raw parameters.

        Returns:
            (effective parameters, 4x4 matrix J) with J[i, j] the derivative
            of effective parameter i to raw parameter j, both ordered
            [alpha, beta, rho, nu]
        """
        if end_time <= 0 or end_time <= start_time:
            raise ValueError(f"End time ({end_time}) must be positive and after start time ({start_time})")
        if start_time > 0:
            alpha_hat, rho_hat, nu_hat, jac = self._before_start(params, start_time, end_time)
        else:
            alpha_hat, rho_hat, nu_hat, jac = self._after_start(params, start_time, end_time)
        jac[1, 1] = 1.0
        effective = SabrParams(alpha=alpha_hat, beta=params.beta, rho=rho_hat, nu=nu_hat, shift=params.shift)
        return effective, jac

    def _before_start(self, params: SabrParams, t0: float, t1: float):
        q = self.q
        alpha, rho, nu = params.alpha, params.rho, params.nu
        tau = 2 * q * t0 + t1
        gamma1 = (tau * (2 * tau**3 + t1**3 + q * (4 * q - 2) * t0**3 + 6 * q * t0**2 * t1)
                  / ((4 * q + 3) * (2 * q + 1)))
        # gamma2 = rho^2 * c2
        c2 = (3 * q * (t1 - t0)**2 * (3 * tau**2 - t1**2 + 5 * q * t0**2 + 4 * t0 * t1)
              / ((4 * q + 3) * (3 * q + 2)**2))
        gamma = gamma1 + rho**2 * c2
        c3 = (3 * tau**2 + 2 * q * t0**2 + t1**2) / (6 * q + 4)
        c4 = (2 * q + 1) / (tau**3 * t1)
        c5 = (tau**2 + 2 * q * t0**2 + t1**2) / (2 * t1 * tau * (q + 1))

        rho_hat = rho * c3 / np.sqrt(gamma)
        nu_hat = nu * np.sqrt(gamma * c4)
        h = nu**2 * (c5 - gamma * c4)
        alpha_hat = alpha * np.sqrt(tau / ((2 * q + 1) * t1)) * np.exp(0.25 * h * t1)

        jac = np.zeros((4, 4))
        jac[0, 0] = alpha_hat / alpha
        jac[0, 2] = -alpha_hat * 0.5 * t1 * nu**2 * c4 * rho * c2
        jac[0, 3] = alpha_hat * 0.5 * t1 * nu * (c5 - gamma * c4)
        jac[2, 2] = c3 / np.sqrt(gamma) * (1.0 - rho**2 * c2 / gamma)
        jac[3, 2] = nu * c4 * rho * c2 / np.sqrt(gamma * c4)
        jac[3, 3] = np.sqrt(gamma * c4)
        return float(alpha_hat), float(rho_hat), float(nu_hat), jac

    def _after_start(self, params: SabrParams, t0: float, t1: float):
        q = self.q
        alpha, rho, nu = params.alpha, params.rho, params.nu
        zeta = 3.0 / (4 * q + 3) * (1.0 / (2 * q + 1) + rho**2 * 2 * q / (3 * q + 2)**2)
        dzeta = 3.0 / (4 * q + 3) * 4 * q * rho / (3 * q + 2)**2

        rho_hat = 2 * rho / (np.sqrt(zeta) * (3 * q + 2))
        nu_hat = nu * np.sqrt(zeta * (2 * q + 1))
        alpha_hat = (alpha / np.sqrt(2 * q + 1) * (t1 / (t1 - t0))**q
                     * np.exp(0.25 * (nu**2 / (q + 1) - nu_hat**2) * t1))

        jac = np.zeros((4, 4))
        jac[0, 0] = alpha_hat / alpha
        jac[0, 2] = -0.25 * t1 * nu**2 * (2 * q + 1) * dzeta * alpha_hat
        jac[0, 3] = alpha_hat * 0.5 * t1 * nu * (1.0 / (q + 1) - zeta * (2 * q + 1))
        jac[2, 2] = 2.0 / ((3 * q + 2) * np.sqrt(zeta)) - rho_hat / (2 * zeta) * dzeta
        jac[3, 2] = nu_hat / (2 * zeta) * dzeta
        jac[3, 3] = np.sqrt(zeta * (2 * q + 1))
        return float(alpha_hat), float(rho_hat), float(nu_hat), jac


__all__ = [
    "SabrParams",
    "VolatilityAdjoint",
    "hagan_black_vol",
    "volatility_adjoint",
    "SabrInArrearsFunction",
    "CUTOFF_MONEYNESS",
    "MIN_VOL",
]
