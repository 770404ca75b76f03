"""
Unit tests for substitution models.
"""

import numpy as np
import pytest

from segsim.core.matrix import create_reversible_Q, eigen_decompose_rev
from segsim.models import get_model, gtr, gy94, hky85, jc69, k80, poisson


def assert_valid_rate_matrix(model):
    Q = model.Q
    np.testing.assert_allclose(Q.sum(axis=1), 0.0, atol=1e-12)
    # Normalised to one substitution per unit time
    assert -np.dot(model.pi, np.diag(Q)) == pytest.approx(1.0)
    # Detailed balance
    flux = model.pi[:, np.newaxis] * Q
    np.testing.assert_allclose(flux, flux.T, atol=1e-12)


class TestNucleotideModels:
    """Test DNA/RNA models."""

    @pytest.mark.parametrize("factory", [jc69, k80, hky85, gtr])
    def test_rate_matrices(self, factory):
        model = factory()
        assert model.states == ('T', 'C', 'A', 'G')
        assert_valid_rate_matrix(model)

    def test_rna_states(self):
        assert hky85(rna=True).states == ('U', 'C', 'A', 'G')

    def test_kappa_scales_transitions(self):
        Q = k80(kappa=4.0).Q
        # T<->C transition vs T<->A transversion
        assert Q[0, 1] / Q[0, 2] == pytest.approx(4.0)

    def test_hky85_frequencies(self):
        model = hky85(kappa=2.0, pi=[0.1, 0.2, 0.3, 0.4])
        np.testing.assert_allclose(model.pi, [0.1, 0.2, 0.3, 0.4])
        assert_valid_rate_matrix(model)

    def test_gtr_rates(self):
        model = gtr(rates={'AG': 5.0, 'TC': 3.0})
        assert model.parameters['rates']['AG'] == 5.0
        assert model.parameters['rates']['CG'] == 1.0
        assert_valid_rate_matrix(model)

    def test_gtr_unknown_rate(self):
        with pytest.raises(ValueError, match="Unknown GTR rate"):
            gtr(rates={'XY': 1.0})

    def test_invalid_kappa(self):
        with pytest.raises(ValueError, match="kappa"):
            hky85(kappa=0.0)


class TestOtherModels:
    """Test protein and codon models."""

    def test_poisson(self):
        model = poisson()
        assert model.n_states == 20
        assert_valid_rate_matrix(model)

    def test_gy94(self):
        model = gy94(kappa=2.0, omega=0.5)
        assert model.n_states == 61
        assert model.states[0] == 'TTT'
        assert_valid_rate_matrix(model)

    def test_gy94_no_double_changes(self):
        Q = gy94().Q
        # TTT -> CCC differs at every position
        i, j = gy94().states.index('TTT'), gy94().states.index('CCC')
        assert Q[i, j] == 0.0


class TestGetModel:
    """Test model lookup."""

    def test_default_models(self):
        assert get_model().name == 'HKY85'
        assert get_model(alphabet='protein').name == 'Poisson'
        assert get_model(alphabet='codon').name == 'GY94'

    def test_case_insensitive(self):
        assert get_model('jc69').name == 'JC69'
        assert get_model('m0', alphabet='codon', omega=0.2).parameters['omega'] == 0.2

    def test_model_not_available_for_alphabet(self):
        with pytest.raises(ValueError, match="not available for protein"):
            get_model('HKY85', alphabet='protein')

    def test_unknown_alphabet(self):
        with pytest.raises(ValueError, match="Unknown alphabet"):
            get_model(alphabet='binary')


class TestMatrix:
    """Test matrix helpers."""

    def test_eigen_reconstruction(self):
        pi = np.array([0.1, 0.2, 0.3, 0.4])
        Q = create_reversible_Q(np.ones((4, 4)), pi)
        eigenvalues, U, V = eigen_decompose_rev(Q, pi)
        np.testing.assert_allclose(U @ np.diag(eigenvalues) @ V, Q, atol=1e-12)

    def test_transition_matrices(self):
        model = jc69()
        P = model.transition_matrices(np.array([0.0, 0.5, 100.0]))

        assert P.shape == (3, 4, 4)
        np.testing.assert_allclose(P.sum(axis=2), 1.0)
        np.testing.assert_allclose(P[0], np.eye(4), atol=1e-10)
        np.testing.assert_allclose(P[2], np.full((4, 4), 0.25), atol=1e-6)
        # JC69: P_ii(t) = 1/4 + 3/4 exp(-4t/3)
        assert P[1, 0, 0] == pytest.approx(0.25 + 0.75 * np.exp(-4 * 0.5 / 3))
