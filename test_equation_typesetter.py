# test_equation_typesetter.py
#
# Run:
#   python -m unittest -v

import unittest

import config
import equation_typesetter as m
from errors import InvalidExpression
from latex_sanitizer import normalize_expression, sanitize_latex


class TestNormalizeExpression(unittest.TestCase):
    def test_drops_statement_terminators(self):
        self.assertEqual(normalize_expression("  y = x + 1;; "), "y = x + 1")

    def test_elementwise_operators(self):
        self.assertEqual(normalize_expression("y = a.*x.^2./b"), "y = a*x^2/b")


class TestSanitizeLatex(unittest.TestCase):
    def test_removes_limits(self):
        self.assertEqual(sanitize_latex(r"\sum\limits_{i=1}^{n} i"), r"\sum_{i=1}^{n} i")

    def test_short_inequalities(self):
        self.assertEqual(sanitize_latex(r"x \le y \ge z"), r"x \leq y \geq z")

    def test_left_is_not_touched(self):
        self.assertEqual(sanitize_latex(r"\left(x\right)"), r"\left(x\right)")

    def test_absolute_value_bars(self):
        self.assertEqual(sanitize_latex(r"\left\lvert x \right\rvert"), r"\left| x \right|")


class TestToLatex(unittest.TestCase):
    def test_assignment_becomes_equation(self):
        latex = m.to_latex("y = x^2 + x")
        self.assertTrue(latex.startswith("y = "))
        self.assertIn("x^{2}", latex)

    def test_matlab_expression(self):
        latex = m.to_latex(
            "y = exp(a^3 / b^2) * (x^2 + 2*x - sqrt(3))/(x^3 + 2*x^2 - 4* x + 12);"
        )
        self.assertIn(r"\sqrt{3}", latex)
        self.assertIn("e^{", latex)
        self.assertIn(r"\frac", latex)

    def test_python_expression(self):
        self.assertIn("x^{3}", m.to_latex("y = x**3"))

    def test_plain_expression_without_assignment(self):
        self.assertIn(r"\sin", m.to_latex("sin(x) + 1"))

    def test_comparison_is_not_an_assignment(self):
        self.assertIn(r"\leq", m.to_latex("x <= 1"))

    def test_rejects_non_math(self):
        for bad in (
            "This is not an equation.",
            "disp('This is not an equation.')",
            "for i in range(3): pass",
            "",
            "y = ",
            "a = b = c",
        ):
            with self.subTest(expr=bad):
                with self.assertRaises(InvalidExpression):
                    m.to_latex(bad)

    def test_builtins_are_not_called(self):
        # Names outside SymPy turn into undefined functions instead of running.
        self.assertIn(r"\operatorname{print}", m.to_latex("print(x)"))

    def test_namespace_holds_only_sympy_names(self):
        self.assertNotIn("__builtins__", m._SYMPY_NAMESPACE)
        self.assertNotIn("print", m._SYMPY_NAMESPACE)
        self.assertIs(m._SYMPY_NAMESPACE["sqrt"], m.sp.sqrt)


class TestTypeset(unittest.TestCase):
    def test_valid_expression(self):
        text, is_math = m.typeset("y = x^2 + x")
        self.assertTrue(is_math)
        self.assertTrue(text.startswith("$") and text.endswith("$"))

    def test_fallback_quotes_the_original(self):
        expr = "disp('This is not an equation.')"
        text, is_math = m.typeset(expr)
        self.assertFalse(is_math)
        self.assertEqual(text, config.FALLBACK_MESSAGE.format(expr=expr))
        self.assertIn(expr, text)

    def test_latex_mathtext_cannot_render_falls_back(self):
        text, is_math = m.typeset("Matrix([[1, 2], [3, 4]])")
        self.assertFalse(is_math)
        self.assertIn("Matrix([[1, 2], [3, 4]])", text)

    def test_check_mathtext(self):
        m.check_mathtext(r"$\frac{1}{2}$")
        with self.assertRaises(InvalidExpression):
            m.check_mathtext(r"$\frac{1}$")


if __name__ == "__main__":
    unittest.main()
