"""Tests for compression, expansion, mixing and Mach-number processes."""

import math

import numpy as np
import pytest

from gas_thermo.core.constants import P_STD, T_STD
from gas_thermo.core.exceptions import ConvergenceError, InvalidProcessParameter
from gas_thermo.core.gas import Gas
from gas_thermo.core.species import SpeciesRegistry
from gas_thermo.processes.turbo import compress, expand, gas_mach, mix


class TestCompress:
    """Tests for polytropic compression."""

    def test_unit_ratio_is_identity(self, gas):
        compress(gas, 1.0, 1.0)
        assert gas.T == pytest.approx(T_STD, abs=1e-9)
        assert gas.P == pytest.approx(P_STD)

    def test_pressure_ratio_applied(self, gas):
        assert compress(gas, 2.0) is gas
        assert gas.P == 2 * P_STD
        assert gas.T == pytest.approx(363.3, abs=0.5)

    def test_isentropic(self, gas):
        s0 = gas.s
        compress(gas, 8.0)
        assert gas.s == pytest.approx(s0, abs=1e-8)

    def test_efficiency_heats_outlet(self, registry):
        ideal = compress(Gas(registry), 10.0)
        lossy = compress(Gas(registry), 10.0, eta_p=0.9)
        assert lossy.T > ideal.T
        assert lossy.P == ideal.P

    def test_across_coefficient_switch(self, registry):
        """A high ratio pushes the outlet past 1000 K."""
        gas = Gas(registry, T=600.0)
        s0 = gas.s
        compress(gas, 15.0)
        assert gas.T > 1000.0
        assert gas.s == pytest.approx(s0, abs=1e-8)

    @pytest.mark.parametrize("T1", [1200.0, 1500.0, 2000.0, 3000.0])
    def test_high_inlet_temperature(self, registry, T1):
        """The phi iteration converges where rounding noise exceeds 1e-12 K."""
        gas = Gas(registry, T=T1)
        s0 = gas.s
        compress(gas, 3.0)
        assert gas.T > T1
        assert gas.s == pytest.approx(s0, abs=1e-8)

    def test_rejects_expansion_ratio(self, gas):
        with pytest.raises(InvalidProcessParameter, match=r"needs to be ≥ 1\.0.*`expand`"):
            compress(gas, 0.5)
        assert gas.TP == (T_STD, P_STD)

    @pytest.mark.parametrize("eta", [0.0, -0.5])
    def test_rejects_bad_efficiency(self, gas, eta):
        with pytest.raises(InvalidProcessParameter, match="efficiency"):
            compress(gas, 2.0, eta)
        assert gas.TP == (T_STD, P_STD)

    def test_convergence_error(self, gas):
        with pytest.raises(ConvergenceError) as exc_info:
            compress(gas, 10.0, itermax=1)
        assert exc_info.value.iterations == 1
        assert exc_info.value.step > 0.0
        assert exc_info.value.residual > 0.0


class TestExpand:
    """Tests for polytropic expansion."""

    def test_expand(self, gas):
        expand(gas, 0.5)
        assert gas.P == 0.5 * P_STD
        assert gas.T == pytest.approx(244.55, abs=0.5)

    def test_reverses_compression(self, gas):
        compress(gas, 4.0)
        expand(gas, 0.25)
        assert gas.T == pytest.approx(T_STD, abs=1e-8)
        assert gas.P == pytest.approx(P_STD)

    def test_efficiency_heats_outlet(self, registry):
        ideal = expand(Gas(registry, T=1400.0), 0.2)
        lossy = expand(Gas(registry, T=1400.0), 0.2, eta_p=0.9)
        assert lossy.T > ideal.T

    @pytest.mark.parametrize("T1", [1500.0, 2500.0, 3000.0])
    def test_high_inlet_temperature(self, registry, T1):
        gas = Gas(registry, T=T1)
        s0 = gas.s
        expand(gas, 0.3)
        assert gas.T < T1
        assert gas.P == pytest.approx(0.3 * P_STD)
        assert gas.s == pytest.approx(s0, abs=1e-8)

    def test_step_below_zero_kelvin(self, quadratic_registry):
        """A Newton step past 0 K raises ConvergenceError at the last valid iterate."""
        gas = Gas(quadratic_registry, [1.0], T=300.0)
        with pytest.raises(ConvergenceError, match="valid temperature range") as exc_info:
            expand(gas, 1.0e-3)
        err = exc_info.value
        assert err.gas is gas
        assert gas.T > 0.0
        assert err.iterations == 1
        assert err.residual > 0.0

    def test_rejects_compression_ratio(self, gas):
        with pytest.raises(InvalidProcessParameter, match=r"needs to be ≤ 1\.0.*`compress`"):
            expand(gas, 1.5)
        assert gas.TP == (T_STD, P_STD)

    def test_rejects_non_positive_ratio(self, gas):
        with pytest.raises(InvalidProcessParameter):
            expand(gas, 0.0)


class TestMix:
    """Tests for adiabatic mixing."""

    def test_hot_and_cold_air(self, registry):
        cold = Gas(registry)
        hot = Gas(registry, T=3 * T_STD)
        mixed = mix(cold, hot, 2.0)
        assert mixed.T == pytest.approx(703.6767764998808, rel=1e-6)

    def test_inputs_untouched(self, registry):
        cold = Gas(registry)
        hot = Gas(registry, T=1000.0, P=2 * P_STD)
        mixed = mix(cold, hot, 1.0)
        assert mixed is not cold and mixed is not hot
        assert cold.TP == (T_STD, P_STD)
        assert hot.TP == (1000.0, 2 * P_STD)

    def test_enthalpy_conserved(self, registry):
        a = Gas.from_mass_fractions(registry, {"N2": 1.0}, T=400.0)
        b = Gas.from_mass_fractions(registry, {"CO2": 0.6, "H2O": 0.4}, T=1600.0)
        mixed = mix(a, b, 0.5)
        assert mixed.h * 1.5 == pytest.approx(a.h + 0.5 * b.h)
        assert mixed.Y_dict["N2"] == pytest.approx(1.0 / 1.5)
        assert mixed.Y_dict["CO2"] == pytest.approx(0.3 / 1.5)
        assert mixed.Y.sum() == pytest.approx(1.0)

    def test_pressure_policy(self, registry):
        a = Gas(registry, P=2 * P_STD)
        b = Gas(registry, P=P_STD)
        assert mix(a, b, 1.0).P == P_STD
        assert mix(a, b, 1.0, P=3 * P_STD).P == 3 * P_STD

    def test_zero_ratio(self, registry):
        a = Gas(registry, T=500.0)
        b = Gas.from_mass_fractions(registry, {"CO2": 1.0}, T=900.0)
        mixed = mix(a, b, 0.0)
        assert mixed.T == pytest.approx(500.0, abs=1e-8)
        assert mixed.Y_dict["CO2"] == 0.0

    def test_negative_ratio(self, gas):
        with pytest.raises(InvalidProcessParameter):
            mix(gas, gas.copy(), -1.0)

    def test_incompatible_registries(self, registry, gas):
        sub = SpeciesRegistry([registry["N2"], registry["O2"]])
        other = Gas(sub, np.array([1.0, 0.0]))
        with pytest.raises(InvalidProcessParameter, match="registries"):
            mix(gas, other, 1.0)


class TestGasMach:
    """Tests for Mach-number changes at constant total enthalpy."""

    def test_accelerate_to_sonic(self, gas):
        gas_mach(gas, 0.0, 1.0)
        assert gas.T == pytest.approx(248.41, abs=0.3)
        # isentropic: P/P0 = (T/T0)^(gamma/(gamma-1)) ~ 0.528
        assert gas.P / P_STD == pytest.approx(0.528, abs=0.005)

    def test_total_enthalpy_conserved(self, registry):
        gas = Gas(registry, T=1500.0)
        h_total = gas.h + 0.5 * 0.3 ** 2 * gas.gamma * gas.R * gas.T
        gas_mach(gas, 0.3, 0.8)
        u2 = 0.8 ** 2 * gas.gamma * gas.R * gas.T
        assert gas.h + 0.5 * u2 == pytest.approx(h_total, rel=1e-12)

    @pytest.mark.parametrize("T1", [1800.0, 2500.0])
    def test_high_temperature(self, registry, T1):
        gas = Gas(registry, T=T1)
        gas_mach(gas, 0.0, 1.0)
        assert gas.T < T1
        assert gas.P < P_STD

    def test_same_mach_is_identity(self, gas):
        gas_mach(gas, 0.5, 0.5)
        assert gas.T == pytest.approx(T_STD, abs=1e-9)
        assert gas.P == pytest.approx(P_STD)

    def test_round_trip(self, gas):
        gas_mach(gas, 0.0, 0.9)
        gas_mach(gas, 0.9, 0.0)
        assert gas.T == pytest.approx(T_STD, abs=1e-8)
        assert gas.P == pytest.approx(P_STD, rel=1e-9)

    def test_lossy_diffusion_recovers_less_pressure(self, registry):
        ideal = gas_mach(Gas(registry), 0.8, 0.0)
        lossy = gas_mach(Gas(registry), 0.8, 0.0, eta_p=0.9)
        assert lossy.T == pytest.approx(ideal.T)
        assert lossy.P < ideal.P
        assert math.isfinite(lossy.P)

    def test_negative_mach(self, gas):
        with pytest.raises(InvalidProcessParameter):
            gas_mach(gas, -0.1, 0.5)
