"""
Closed-form option formulas on a forward rate.

Implements:
- Black'76 (log-normal) price and Greeks
- Shifted Black for negative rates
- Bachelier (normal) price and Greeks
- Implied volatility inversion for both

All functions are pure and take every input explicitly. Theta is the
driftless theta, i.e. the derivative with respect to calendar time with
the forward held fixed. At expiry (T <= 0) or zero volatility the price is
intrinsic, delta is +1 (call) / -1 (put) in the money and 0 otherwise, and
gamma, vega and theta are 0. Black also collapses to intrinsic at a zero
forward or strike.
"""

from typing import Dict

import numpy as np
from scipy.stats import norm


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf


def _intrinsic(F: float, K: float, is_call: bool) -> float:
    return max(F - K, 0.0) if is_call else max(K - F, 0.0)


def _degenerate_greeks(F: float, K: float, df: float, is_call: bool) -> Dict[str, float]:
    if is_call:
        delta = df if F > K else 0.0
    else:
        delta = -df if F < K else 0.0
    return {'delta': delta, 'gamma': 0.0, 'vega': 0.0, 'theta': 0.0}


def bachelier_call(
    F: float,
    K: float,
    T: float,
    sigma_n: float,
    df: float = 1.0
) -> float:
    """
    Bachelier (normal) model call option price.

    Assumes forward follows arithmetic Brownian motion:
    dF = sigma_n * dW

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry (years)
        sigma_n: Normal volatility
        df: Discount factor to payment

    Returns:
        Call option price
    """
    return bachelier_price(F, K, T, sigma_n, True, df)


def bachelier_put(
    F: float,
    K: float,
    T: float,
    sigma_n: float,
    df: float = 1.0
) -> float:
    """Bachelier (normal) model put option price."""
    return bachelier_price(F, K, T, sigma_n, False, df)


def bachelier_price(
    F: float,
    K: float,
    T: float,
    sigma_n: float,
    is_call: bool = True,
    df: float = 1.0
) -> float:
    """
    Bachelier price of a call or put.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_n: Normal volatility
        is_call: True for call, False for put
        df: Discount factor

    Returns:
        Option price
    """
    if T <= 0 or sigma_n <= 0:
        return df * _intrinsic(F, K, is_call)

    sqrt_t = np.sqrt(T)
    d = (F - K) / (sigma_n * sqrt_t)

    if is_call:
        price = (F - K) * N(d) + sigma_n * sqrt_t * n(d)
    else:
        price = (K - F) * N(-d) + sigma_n * sqrt_t * n(d)
    return float(df * price)


def black76_call(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    df: float = 1.0
) -> float:
    """
    Black'76 model call option price.

    Assumes forward follows geometric Brownian motion:
    dF = sigma_b * F * dW

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_b: Black (lognormal) volatility
        df: Discount factor

    Returns:
        Call option price
    """
    return black76_price(F, K, T, sigma_b, True, df)


def black76_put(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    df: float = 1.0
) -> float:
    """Black'76 model put option price."""
    return black76_price(F, K, T, sigma_b, False, df)


def black76_price(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    is_call: bool = True,
    df: float = 1.0
) -> float:
    """
    Black'76 price of a call or put.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_b: Black volatility
        is_call: True for call, False for put
        df: Discount factor

    Returns:
        Option price

    Raises:
        ValueError: If forward or strike is negative
    """
    if T <= 0 or sigma_b <= 0:
        return df * _intrinsic(F, K, is_call)

    if F < 0 or K < 0:
        raise ValueError(f"Forward ({F}) and strike ({K}) must be non-negative for Black model")

    # a zero forward or strike puts d1 at infinity
    if F == 0 or K == 0:
        return df * _intrinsic(F, K, is_call)

    sqrt_t = np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * sigma_b**2 * T) / (sigma_b * sqrt_t)
    d2 = d1 - sigma_b * sqrt_t

    if is_call:
        price = F * N(d1) - K * N(d2)
    else:
        price = K * N(-d2) - F * N(-d1)
    return float(df * price)


def shifted_black_call(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    shift: float,
    df: float = 1.0
) -> float:
    """
    Shifted Black'76 model call option price.

    Allows pricing when forward can be negative:
    d(F + shift) = sigma_b * (F + shift) * dW

    Args:
        F: Forward rate (can be negative)
        K: Strike (can be negative)
        T: Time to expiry
        sigma_b: Black volatility
        shift: Shift parameter (positive)
        df: Discount factor

    Returns:
        Call option price
    """
    return black76_price(F + shift, K + shift, T, sigma_b, True, df)


def shifted_black_put(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    shift: float,
    df: float = 1.0
) -> float:
    """Shifted Black'76 model put option price."""
    return black76_price(F + shift, K + shift, T, sigma_b, False, df)


def bachelier_greeks(
    F: float,
    K: float,
    T: float,
    sigma_n: float,
    df: float = 1.0,
    is_call: bool = True
) -> Dict[str, float]:
    """
    Compute Greeks for Bachelier model.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_n: Normal volatility
        df: Discount factor
        is_call: True for call, False for put

    Returns:
        Dict with delta, gamma, vega, theta
    """
    if T <= 0 or sigma_n <= 0:
        return _degenerate_greeks(F, K, df, is_call)

    sqrt_t = np.sqrt(T)
    d = (F - K) / (sigma_n * sqrt_t)

    delta = df * N(d) if is_call else -df * N(-d)

    return {
        'delta': float(delta),
        'gamma': float(df * n(d) / (sigma_n * sqrt_t)),
        'vega': float(df * sqrt_t * n(d)),
        'theta': float(-df * sigma_n * n(d) / (2 * sqrt_t))
    }


def black76_greeks(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    df: float = 1.0,
    is_call: bool = True
) -> Dict[str, float]:
    """
    Compute Greeks for Black'76 model.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_b: Black volatility
        df: Discount factor
        is_call: True for call, False for put

    Returns:
        Dict with delta, gamma, vega, theta

    Raises:
        ValueError: If forward or strike is negative
    """
    if T <= 0 or sigma_b <= 0:
        return _degenerate_greeks(F, K, df, is_call)

    if F < 0 or K < 0:
        raise ValueError(f"Forward ({F}) and strike ({K}) must be non-negative for Black model")

    if F == 0 or K == 0:
        return _degenerate_greeks(F, K, df, is_call)

    sqrt_t = np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * sigma_b**2 * T) / (sigma_b * sqrt_t)

    delta = df * N(d1) if is_call else -df * N(-d1)

    return {
        'delta': float(delta),
        'gamma': float(df * n(d1) / (F * sigma_b * sqrt_t)),
        'vega': float(df * F * sqrt_t * n(d1)),
        'theta': float(-df * F * sigma_b * n(d1) / (2 * sqrt_t))
    }


def implied_vol_bachelier(
    price: float,
    F: float,
    K: float,
    T: float,
    df: float = 1.0,
    is_call: bool = True,
    tol: float = 1e-12,
    max_iter: int = 100
) -> float:
    """
    Compute implied normal volatility from option price.

    Uses Newton-Raphson iteration.

    Args:
        price: Option price
        F: Forward rate
        K: Strike
        T: Time to expiry
        df: Discount factor
        is_call: True for call, False for put
        tol: Convergence tolerance on price
        max_iter: Maximum iterations

    Returns:
        Implied normal volatility
    """
    if T <= 0:
        raise ValueError("Cannot compute implied vol for expired option")

    if price <= _intrinsic(F, K, is_call) * df:
        return 0.0

    sigma = abs(F - K) / np.sqrt(T) if abs(F - K) > 0 else 0.01

    for _ in range(max_iter):
        diff = bachelier_price(F, K, T, sigma, is_call, df) - price
        if abs(diff) < tol:
            break
        vega = bachelier_greeks(F, K, T, sigma, df, is_call)['vega']
        if abs(vega) < 1e-15:
            break
        sigma = max(sigma - diff / vega, 1e-10)

    return float(sigma)


def implied_vol_black(
    price: float,
    F: float,
    K: float,
    T: float,
    df: float = 1.0,
    is_call: bool = True,
    tol: float = 1e-12,
    max_iter: int = 100
) -> float:
    """
    Compute implied Black volatility from option price.

    Uses Newton-Raphson iteration from the Brenner-Subrahmanyam guess.

    Args:
        price: Option price
        F: Forward rate
        K: Strike
        T: Time to expiry
        df: Discount factor
        is_call: True for call, False for put
        tol: Convergence tolerance on price
        max_iter: Maximum iterations

    Returns:
        Implied Black volatility
    """
    if T <= 0:
        raise ValueError("Cannot compute implied vol for expired option")

    if F <= 0 or K <= 0:
        raise ValueError("Forward and strike must be positive")

    sigma = max(np.sqrt(2 * np.pi / T) * price / (df * F), 0.01)

    for _ in range(max_iter):
        diff = black76_price(F, K, T, sigma, is_call, df) - price
        if abs(diff) < tol:
            break
        vega = black76_greeks(F, K, T, sigma, df, is_call)['vega']
        if abs(vega) < 1e-15:
            break
        sigma = max(sigma - diff / vega, 1e-10)

    return float(sigma)
