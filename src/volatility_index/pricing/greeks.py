"""Black-Scholes option Greeks.

Closed-form delta, gamma, theta and vega for European options, and their
sum over a portfolio. The normal distribution is supplied by the caller
(anything with pdf and cdf); by default each calculator builds its own
frozen scipy.stats.norm.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from pydantic import field_validator
from pydantic.dataclasses import dataclass
from scipy.stats import norm


class NormalDistribution(Protocol):
    """Standard normal distribution functions."""

    def pdf(self, x: float) -> float: ...

    def cdf(self, x: float) -> float: ...


class OptionType(str, Enum):
    """Option right."""

    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class OptionContract:
    """A European option position of one unit.

    Rates, volatility and time are annualized; time_to_expiration is in years.
    """

    underlying_price: float
    strike_price: float
    risk_free_rate: float
    volatility: float
    time_to_expiration: float
    option_type: OptionType

    @field_validator(
        "underlying_price", "strike_price", "volatility", "time_to_expiration"
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Ensure inputs that appear in logs or denominators are positive."""
        if v <= 0:
            raise ValueError("Must be positive")
        return v


@dataclass(frozen=True)
class PortfolioGreeks:
    """Summed sensitivities of a set of options."""

    delta: float
    gamma: float
    theta: float
    vega: float


class GreeksCalculator:
    """Computes Black-Scholes Greeks with an injected normal distribution."""

    def __init__(self, distribution: NormalDistribution | None = None) -> None:
        """Initialize the calculator.

        Args:
            distribution: Provider of pdf/cdf, defaults to a standard normal
        """
        self._normal = distribution if distribution is not None else norm()

    def d1_d2(self, option: OptionContract) -> tuple[float, float]:
        """Return the Black-Scholes d1 and d2 terms."""
        vol_sqrt_t = option.volatility * math.sqrt(option.time_to_expiration)
        d1 = (
            math.log(option.underlying_price / option.strike_price)
            + (option.risk_free_rate + 0.5 * option.volatility**2)
            * option.time_to_expiration
        ) / vol_sqrt_t
        return d1, d1 - vol_sqrt_t

    def delta(self, option: OptionContract) -> float:
        """Return dV/dS."""
        d1, _ = self.d1_d2(option)
        if option.option_type == OptionType.CALL:
            return float(self._normal.cdf(d1))
        return -float(self._normal.cdf(-d1))

    def gamma(self, option: OptionContract) -> float:
        """Return d²V/dS² (identical for calls and puts)."""
        d1, _ = self.d1_d2(option)
        return float(self._normal.pdf(d1)) / (
            option.underlying_price
            * option.volatility
            * math.sqrt(option.time_to_expiration)
        )

    def theta(self, option: OptionContract) -> float:
        """Return dV/dt per year."""
        d1, d2 = self.d1_d2(option)
        decay = -(
            option.underlying_price * option.volatility * float(self._normal.pdf(d1))
        ) / (2 * math.sqrt(option.time_to_expiration))
        discounted_strike = option.strike_price * math.exp(
            -option.risk_free_rate * option.time_to_expiration
        )
        if option.option_type == OptionType.CALL:
            return decay - option.risk_free_rate * discounted_strike * float(
                self._normal.cdf(d2)
            )
        return decay + option.risk_free_rate * discounted_strike * float(
            self._normal.cdf(-d2)
        )

    def vega(self, option: OptionContract) -> float:
        """Return dV/dσ (identical for calls and puts)."""
        d1, _ = self.d1_d2(option)
        return (
            option.underlying_price
            * math.sqrt(option.time_to_expiration)
            * float(self._normal.pdf(d1))
        )

    def portfolio_greeks(self, options: Iterable[OptionContract]) -> PortfolioGreeks:
        """Sum the Greeks of several options.

        Args:
            options: Options held, one unit each

        Returns:
            Summed delta, gamma, theta and vega
        """
        delta = gamma = theta = vega = 0.0
        for option in options:
            delta += self.delta(option)
            gamma += self.gamma(option)
            theta += self.theta(option)
            vega += self.vega(option)
        return PortfolioGreeks(delta=delta, gamma=gamma, theta=theta, vega=vega)


def portfolio_greeks(
    options: Iterable[OptionContract],
    distribution: NormalDistribution | None = None,
) -> PortfolioGreeks:
    """Sum the Greeks of several options with a fresh calculator."""
    return GreeksCalculator(distribution).portfolio_greeks(options)
