"""
SABR caplet/floorlet volatilities.

SABR parameters are term structures: alpha, beta, rho and nu are each an
interpolated curve in expiry. A single constant shift applies to both
forward and strike.
"""

from dataclasses import dataclass, replace
from typing import ClassVar, Dict

from ..curves.curve import NodalCurve
from ..sensitivity import (
    CapletFloorletSabrSensitivity,
    CapletFloorletSensitivity,
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    PointSensitivities,
    SabrParameterType,
)
from .sabr import SabrParams, VolatilityAdjoint, volatility_adjoint
from .volatilities import CapletFloorletVolatilities, ModelFamily

# Position of each parameter in the volatility adjoint derivatives
ADJOINT_POSITION = {
    SabrParameterType.ALPHA: 2,
    SabrParameterType.BETA: 3,
    SabrParameterType.RHO: 4,
    SabrParameterType.NU: 5,
}


@dataclass(frozen=True, eq=False)
class SabrParameterCurves:
    """
    SABR parameter term structures.

    Attributes:
        alpha_curve: Alpha by expiry
        beta_curve: Beta by expiry
        rho_curve: Rho by expiry
        nu_curve: Nu by expiry
        shift: Constant shift for forward and strike
    """
    alpha_curve: NodalCurve
    beta_curve: NodalCurve
    rho_curve: NodalCurve
    nu_curve: NodalCurve
    shift: float = 0.0

    def curve(self, parameter: SabrParameterType) -> NodalCurve:
        return {
            SabrParameterType.ALPHA: self.alpha_curve,
            SabrParameterType.BETA: self.beta_curve,
            SabrParameterType.RHO: self.rho_curve,
            SabrParameterType.NU: self.nu_curve,
        }[parameter]

    def params_at(self, expiry: float) -> SabrParams:
        """Point parameters at an expiry."""
        return SabrParams(
            alpha=self.alpha_curve.value(expiry),
            beta=self.beta_curve.value(expiry),
            rho=self.rho_curve.value(expiry),
            nu=self.nu_curve.value(expiry),
            shift=self.shift
        )


@dataclass(frozen=True, eq=False)
class SabrCapletFloorletVolatilities(CapletFloorletVolatilities):
    """
    Black volatilities implied by SABR parameter curves.

    Attributes:
        sabr: SABR parameter curves
    """
    sabr: SabrParameterCurves

    model_family: ClassVar[ModelFamily] = ModelFamily.SABR

    def volatility(self, expiry: float, strike: float, forward: float) -> float:
        return self.volatility_adjoint(expiry, strike, forward).volatility

    def volatility_adjoint(self, expiry: float, strike: float, forward: float) -> VolatilityAdjoint:
        """Volatility and derivatives [dF, dK, dAlpha, dBeta, dRho, dNu]."""
        p = self.sabr.params_at(expiry)
        return volatility_adjoint(forward, strike, expiry, p.alpha, p.beta, p.rho, p.nu, p.shift)

    def shift(self, expiry: float) -> float:
        return self.sabr.shift

    def parameter_sensitivity(self, sensitivities: PointSensitivities) -> CurrencyParameterSensitivities:
        """
        Resolve SABR parameter and volatility sensitivities to the parameter curves.

        Volatility-level records are first split into parameter records with
        the chain rule through the volatility adjoint.
        """
        result = CurrencyParameterSensitivities.empty()
        for s in sensitivities:
            if isinstance(s, CapletFloorletSensitivity) and s.volatilities_name == self.name:
                derivatives = self.volatility_adjoint(s.expiry, s.strike, s.forward).derivatives
                for parameter, position in ADJOINT_POSITION.items():
                    result = result.combined_with(
                        self._curve_sensitivity(parameter, s.expiry, s.currency,
                                                s.sensitivity * derivatives[position]))
            elif isinstance(s, CapletFloorletSabrSensitivity) and s.volatilities_name == self.name:
                result = result.combined_with(
                    self._curve_sensitivity(s.sensitivity_type, s.expiry, s.currency, s.sensitivity))
        return result

    def _curve_sensitivity(
        self,
        parameter: SabrParameterType,
        expiry: float,
        currency: str,
        value: float
    ) -> CurrencyParameterSensitivity:
        curve = self.sabr.curve(parameter)
        return CurrencyParameterSensitivity(
            curve.name, currency, tuple(curve.labels), value * curve.node_weights(expiry))

    def parameters(self) -> Dict[str, object]:
        return {self.sabr.curve(p).name: self.sabr.curve(p) for p in SabrParameterType}

    def with_parameters(self, name: str, parameters) -> "SabrCapletFloorletVolatilities":
        for p in SabrParameterType:
            if self.sabr.curve(p).name == name:
                field_name = f"{p.value}_curve"
                return replace(self, sabr=replace(self.sabr, **{field_name: parameters}))
        raise KeyError(f"Unknown parameter curve {name} for {self.name}")


__all__ = [
    "ADJOINT_POSITION",
    "SabrParameterCurves",
    "SabrCapletFloorletVolatilities",
]
