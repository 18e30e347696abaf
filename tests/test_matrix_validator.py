"""Tests for update matrix verification."""

import pytest

from bodyevolve import Body, MatrixValidator, UpdateMatrix, UpdateMatrixError, VarType


def _const(value):
    def rule(bodies, system, body_ids):
        return value
    return rule


class TestSingleEquation:
    """Value types accept exactly one contributing equation."""

    def test_two_equations_on_explicit_value_rejected(self):
        bodies = [Body("b", 1.0, radius=1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "radius", VarType.EXPLICIT_AGE)
        matrix.add_equation(0, "radius", _const(1.0), "track_a")
        matrix.add_equation(0, "radius", _const(2.0), "track_b")

        assert not MatrixValidator.matrix_is_valid(matrix, bodies)
        with pytest.raises(UpdateMatrixError, match="more than one equation"):
            matrix.verify(bodies)

    def test_two_equations_on_derivative_allowed(self):
        bodies = [Body("b", 1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(1.0), "a")
        matrix.add_equation(0, "mass", _const(2.0), "b")
        matrix.verify(bodies)


class TestStructure:
    """Indices and attributes must exist."""

    def test_unknown_dependency(self):
        matrix = UpdateMatrix(2)
        matrix.add_equation(1, "mass", _const(1.0), "tides", (1, 5))
        problems = MatrixValidator.problems(matrix)
        assert any("unknown body 5" in p for p in problems)

    def test_missing_attribute(self):
        bodies = [Body("b", 1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "water_mass", _const(1.0), "ocean")
        problems = MatrixValidator.problems(matrix, bodies)
        assert any("no attribute 'water_mass'" in p for p in problems)

    def test_non_finite_initial_value(self):
        bodies = [Body("b", float("nan"))]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(1.0), "m")
        assert not MatrixValidator.matrix_is_valid(matrix, bodies)

    def test_body_count_mismatch(self):
        matrix = UpdateMatrix(2)
        problems = MatrixValidator.problems(matrix, [Body("only", 1.0)])
        assert len(problems) == 1

    def test_report_prints_invalid_tag(self, capsys):
        MatrixValidator.report_invalid_matrix("update matrix", ["first", "second"])
        out = capsys.readouterr().out
        assert out.startswith("[invalid] update matrix")
        assert "  first" in out
