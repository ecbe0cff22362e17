"""Exact calculator: rationals, π, square roots and special-angle trigonometry.

Entry point for other code: ExactCalc.MathEngine.calculate(problem, digits).
"""
